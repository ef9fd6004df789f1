"""
Company profile domain service.

One company profile per account. Logo and banner images are referenced by
URL only; uploading and transforming images is handled elsewhere.
"""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

import nh3

from .exceptions import ConflictError, NotFoundError, ValidationError
from .models import CompanyProfile
from .ports import CompanyRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "company_name",
    "address",
    "city",
    "state",
    "country",
    "postal_code",
    "industry",
)
OPTIONAL_FIELDS = ("website", "founded_date", "description", "social_links")
UPDATABLE_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS + ("logo_url", "banner_url")
URL_FIELDS = ("website", "logo_url", "banner_url")
TEXT_FIELDS = ("description",)


def is_valid_url(value: str) -> bool:
    """http(s) URL with a host."""
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _strip_markup(fields: dict[str, Any]) -> dict[str, Any]:
    """Free-text fields are stored as plain text; all HTML tags are removed."""
    for key in TEXT_FIELDS:
        if isinstance(fields.get(key), str):
            fields[key] = nh3.clean(fields[key], tags=set())
    return fields


def _url_violations(fields: dict[str, Any]) -> list[str]:
    errors = []
    for key in URL_FIELDS:
        value = fields.get(key)
        if value and not is_valid_url(value):
            errors.append(f"Invalid URL for {key}")
    for name, url in (fields.get("social_links") or {}).items():
        if url and not is_valid_url(url):
            errors.append(f"Invalid social media URL for {name}")
    return errors


@dataclass
class CompanyService:
    repository: CompanyRepository

    def register(self, owner_id: int, data: dict[str, Any]) -> CompanyProfile:
        """
        Create the company profile for an account.

        Raises:
            ValidationError: Missing required fields or malformed URLs
            ConflictError: The account already owns a company profile
        """
        fields = _strip_markup(
            {k: v for k, v in data.items() if k in REQUIRED_FIELDS + OPTIONAL_FIELDS}
        )

        errors = [
            f"{name.replace('_', ' ').capitalize()} is required"
            for name in REQUIRED_FIELDS
            if not str(fields.get(name) or "").strip()
        ]
        errors.extend(_url_violations(fields))
        if errors:
            raise ValidationError("Company data is invalid", errors)

        if self.repository.find_by_owner(owner_id) is not None:
            raise ConflictError("Company profile already exists for this user")

        company = self.repository.create(owner_id, fields)
        if company is None:
            raise ConflictError("Company profile already exists for this user")
        logger.info("Company profile %s registered for account %s", company.id, owner_id)
        return company

    def get(self, owner_id: int) -> CompanyProfile:
        company = self.repository.find_by_owner(owner_id)
        if company is None:
            raise NotFoundError("Company profile not found")
        return company

    def update(self, owner_id: int, updates: dict[str, Any]) -> CompanyProfile:
        """
        Partial update of whitelisted company fields.

        Raises:
            ValidationError: Nothing to update or malformed URLs
            NotFoundError: No company profile for this account
        """
        fields = _strip_markup(
            {k: v for k, v in updates.items() if k in UPDATABLE_FIELDS and v is not None}
        )
        if not fields:
            raise ValidationError("No valid fields to update", ["No valid fields to update"])

        errors = _url_violations(fields)
        if errors:
            raise ValidationError("Company data is invalid", errors)

        company = self.repository.update(owner_id, fields)
        if company is None:
            raise NotFoundError("Company profile not found")
        return company
