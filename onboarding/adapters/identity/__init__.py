"""External identity provider adapters."""

from .firebase import FirebaseIdentityProvider
from .local import LocalIdentityProvider

__all__ = ["FirebaseIdentityProvider", "LocalIdentityProvider"]
