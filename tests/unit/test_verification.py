from utils.verification import generate_verification_code, get_code_expiry_time, utcnow
from datetime import datetime, timedelta, timezone

def test_generate_verification_code():
    code = generate_verification_code()
    assert len(code) == 32
    int(code, 16)  # hex only

    assert generate_verification_code() != code


def test_code_expiry_time():
    expiry = get_code_expiry_time(minutes=5)
    now = datetime.now(timezone.utc)
    assert expiry > now
    assert expiry < now + timedelta(minutes=6)


def test_code_expiry_time_from_given_now():
    now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert get_code_expiry_time(minutes=5, now=now) == datetime(2024, 1, 1, 12, 5, tzinfo=timezone.utc)


def test_utcnow_is_timezone_aware():
    assert utcnow().tzinfo is not None
