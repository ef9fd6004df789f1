"""
API routers.

Contains the authentication/verification and company profile endpoints.
"""

from .auth import router as auth_router
from .company import router as company_router

__all__ = ["auth_router", "company_router"]
