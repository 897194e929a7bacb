from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from schemas.validators import check_password_strength, normalize_email, require_text


class AdminOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    admin_id: int
    username: str
    email: str
    created_at: Optional[datetime] = None


class CreateAdminRequest(BaseModel):
    username: str
    email: EmailStr
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value):
        return normalize_email(value)

    @field_validator('username')
    @classmethod
    def validate_username(cls, value):
        return require_text(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value)


class UpdateAdminRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, value):
        return normalize_email(value) if value is not None else value

    @field_validator('username')
    @classmethod
    def validate_username(cls, value):
        return require_text(value) if value is not None else value

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value) if value is not None else value


class CleanupReport(BaseModel):
    expired_refresh_tokens: int
    expired_verification_codes: int
    stale_temp_users: int
