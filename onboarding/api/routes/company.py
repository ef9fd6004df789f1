"""
Company profile routes.

All endpoints act on the company owned by the bearer-authenticated account.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from onboarding.api.dependencies import get_company_service, get_current_account
from onboarding.api.models import (
    CompanyEnvelope,
    CompanyRequest,
    CompanyResponse,
    CompanyUpdateRequest,
    ErrorResponse,
)
from onboarding.domain.companies import CompanyService
from onboarding.domain.models import Account

router = APIRouter(prefix="/company", tags=["company"])

CurrentAccount = Annotated[Account, Depends(get_current_account)]


def _fields(payload: BaseModel) -> dict[str, Any]:
    """Dump to plain values: URLs as strings, dates kept as dates."""
    data = payload.model_dump(mode="json", exclude_none=True)
    if getattr(payload, "founded_date", None) is not None:
        data["founded_date"] = payload.founded_date
    return data


@router.post(
    "/register",
    response_model=CompanyEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        409: {"model": ErrorResponse, "description": "Company already registered"},
    },
    summary="Register the current user's company",
)
async def register_company(
    request_data: CompanyRequest,
    account: CurrentAccount,
    service: CompanyService = Depends(get_company_service),
) -> CompanyEnvelope:
    company = service.register(account.id, _fields(request_data))
    return CompanyEnvelope(
        message="Company registered successfully",
        company=CompanyResponse.model_validate(company),
    )


@router.get(
    "/profile",
    response_model=CompanyEnvelope,
    responses={404: {"model": ErrorResponse, "description": "Company profile not found"}},
    summary="Get the current user's company profile",
)
async def get_company_profile(
    account: CurrentAccount,
    service: CompanyService = Depends(get_company_service),
) -> CompanyEnvelope:
    company = service.get(account.id)
    return CompanyEnvelope(
        message="Company profile retrieved", company=CompanyResponse.model_validate(company)
    )


@router.put(
    "/profile",
    response_model=CompanyEnvelope,
    responses={
        400: {"model": ErrorResponse, "description": "Validation error"},
        404: {"model": ErrorResponse, "description": "Company profile not found"},
    },
    summary="Update the current user's company profile",
)
async def update_company_profile(
    request_data: CompanyUpdateRequest,
    account: CurrentAccount,
    service: CompanyService = Depends(get_company_service),
) -> CompanyEnvelope:
    company = service.update(account.id, _fields(request_data))
    return CompanyEnvelope(
        message="Company profile updated successfully",
        company=CompanyResponse.model_validate(company),
    )
