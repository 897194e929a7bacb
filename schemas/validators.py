import re
import phonenumbers
from core.config import settings


def check_password_strength(value: str) -> str:
    """
    Password must be at least 8 characters and contain:
    - At least one digit
    - At least one uppercase letter
    """
    if len(value) < 8:
        raise ValueError('Password must be at least 8 characters')

    if not re.search(r'\d', value):
        raise ValueError('Password must contain at least one digit')

    if not re.search(r'[A-Z]', value):
        raise ValueError('Password must contain at least one uppercase letter')

    return value


def normalize_phone_number(value: str) -> str:
    """
    Validates a phone number with Google's phonenumbers library and returns it in E.164.
    Numbers without a country code are read in DEFAULT_PHONE_REGION.
    """
    try:
        parsed = phonenumbers.parse(value, settings.DEFAULT_PHONE_REGION)
    except phonenumbers.NumberParseException:
        raise ValueError('Phone number could not be parsed (e.g.: +821012345678, 010-1234-5678)')

    if not phonenumbers.is_valid_number(parsed):
        raise ValueError('Invalid phone number')

    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError('must not be empty')
    return value


def normalize_email(value: str) -> str:
    # Accounts, verification codes and the cooldown are all keyed on the lower-cased address
    return value.strip().lower()
