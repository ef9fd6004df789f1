"""Phone number validation and E.164 normalization."""

import phonenumbers

from .exceptions import ValidationError


def normalize_phone(raw: str | None) -> str:
    """
    Validate a phone number and return it in E.164 form.

    The number must carry its international prefix; no default region
    is assumed.

    Raises:
        ValidationError: If the number is missing or not valid in any region
    """
    if not raw or not raw.strip():
        raise ValidationError("Phone number is required", ["Phone number is required"])

    try:
        parsed = phonenumbers.parse(raw, None)
    except phonenumbers.NumberParseException:
        raise ValidationError(
            "Invalid phone number format", ["Invalid phone number format"]
        ) from None

    if not phonenumbers.is_valid_number(parsed):
        raise ValidationError("Invalid phone number format", ["Invalid phone number format"])

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
