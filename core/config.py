from pydantic_settings import BaseSettings
from pydantic import ConfigDict

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env", extra="ignore")

    ENV: str = "development"

    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: int = 30

    # Access and refresh tokens are signed with different secrets
    ACCESS_TOKEN_SECRET: str
    REFRESH_TOKEN_SECRET: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 15
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    REFRESH_COOKIE_NAME: str = "refreshToken"

    VERIFICATION_CODE_EXPIRE_MINUTES: int = 5
    VERIFICATION_COOLDOWN_MINUTES: int = 5
    TEMP_USER_RETENTION_HOURS: int = 48

    MAIL_USERNAME: str
    MAIL_PASSWORD: str
    MAIL_FROM: str
    MAIL_SERVER: str
    MAIL_PORT: int

    GOOGLE_CLIENT_ID: str

    DEFAULT_PHONE_REGION: str = "KR"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]


settings = Settings()
