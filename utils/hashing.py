from passlib.context import CryptContext

bcrypt_context = CryptContext(schemes=['bcrypt'], deprecated='auto')

# Stored in place of a hash for placeholder accounts; no password verifies against it
UNUSABLE_PASSWORD = "!unusable"


def get_password_hash(password: str):
    # Bcrypt has a 72-byte limit, truncate if necessary
    return bcrypt_context.hash(password[:72])


def verify_password(plain_password: str, hashed_password: str | None):
    if not is_password_usable(hashed_password):
        return False
    # Bcrypt has a 72-byte limit, truncate if necessary
    return bcrypt_context.verify(plain_password[:72], hashed_password)


def is_password_usable(hashed_password: str | None) -> bool:
    return bool(hashed_password) and not hashed_password.startswith("!")
