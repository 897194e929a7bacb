import secrets
from datetime import datetime, timezone, timedelta

CODE_BYTES = 16


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_verification_code() -> str:
    # 16 random bytes -> 32 hex characters
    return secrets.token_hex(CODE_BYTES)


def get_code_expiry_time(minutes: int = 5, now: datetime | None = None) -> datetime:
    return (now or utcnow()) + timedelta(minutes=minutes)
