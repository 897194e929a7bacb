import os

# Settings are read when core.config is first imported
os.environ["ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET", "test-refresh-secret")
os.environ.setdefault("MAIL_USERNAME", "mailer@example.com")
os.environ.setdefault("MAIL_PASSWORD", "mail-password")
os.environ.setdefault("MAIL_FROM", "mailer@example.com")
os.environ.setdefault("MAIL_SERVER", "smtp.example.com")
os.environ.setdefault("MAIL_PORT", "587")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id.apps.googleusercontent.com")
os.environ.setdefault("LOG_DIR", "logs")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from main import app
from core.database import Base
from core.principal import Principal
from models.admins import Admin
from models.users import User
from services.token_service import TokenService
from utils.deps import get_db
from utils.hashing import get_password_hash

# SYNC SQLite for testing (matches sync service layer)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

TEST_PASSWORD = "TestPassword123!"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
async def client(session: Session):
    """
    Yields an HTTP client that interacts with the app using the test database.
    The client is async (for FastAPI), but the DB session is sync.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass  # Session cleanup handled by session fixture

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def verified_user(session: Session) -> User:
    """A fully registered user whose password is TEST_PASSWORD."""
    user = User(
        email="testuser@example.com",
        username="testuser",
        password_hash=get_password_hash(TEST_PASSWORD),
        address="12 Teheran-ro, Gangnam-gu, Seoul",
        building_name="Aura Tower",
        phone_number="+821012345678",
        is_verified=True,
        is_active=True
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def admin_user(session: Session) -> Admin:
    admin = Admin(
        email="admin@example.com",
        username="admin",
        password_hash=get_password_hash(TEST_PASSWORD)
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def refresh_cookie(token: str) -> dict:
    return {"Cookie": f"refreshToken={token}"}


@pytest.fixture
def user_headers(verified_user: User) -> dict:
    return bearer(TokenService.generate_access_token(Principal.user(verified_user.user_id)))


@pytest.fixture
def admin_headers(admin_user: Admin) -> dict:
    return bearer(TokenService.generate_access_token(Principal.admin(admin_user.admin_id)))
