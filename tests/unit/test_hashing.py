from utils.hashing import UNUSABLE_PASSWORD, get_password_hash, is_password_usable, verify_password

def test_password_hashing():
    password = "SuperSecret123"
    hashed = get_password_hash(password)
    assert hashed != password
    assert is_password_usable(hashed) is True


def test_password_verification():
    password = "SuperSecret123"
    hashed = get_password_hash(password)

    assert verify_password(password, hashed) is True
    assert verify_password("WrongPassword1", hashed) is False

    long_pass = "a" * 100
    hashed_long = get_password_hash(long_pass)
    assert verify_password(long_pass, hashed_long) is True


def test_placeholder_password_never_verifies():
    assert is_password_usable(UNUSABLE_PASSWORD) is False
    assert verify_password("", UNUSABLE_PASSWORD) is False
    assert verify_password("!unusable", UNUSABLE_PASSWORD) is False
    assert verify_password("anything", None) is False
