from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from schemas.validators import normalize_email, normalize_phone_number, require_text


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    username: Optional[str] = None
    email: str
    address: Optional[str] = None
    building_name: Optional[str] = None
    phone_number: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None


class UserInfoUpdate(BaseModel):
    """Fields a user may change on their own profile."""
    username: Optional[str] = None
    address: Optional[str] = None
    building_name: Optional[str] = None
    phone_number: Optional[str] = None

    @field_validator('username')
    @classmethod
    def validate_username(cls, value):
        return require_text(value) if value is not None else value

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, value):
        return normalize_phone_number(value) if value is not None else value


class AdminUserUpdate(UserInfoUpdate):
    """Admins may additionally change the email and activation flag."""
    email: Optional[EmailStr] = None
    is_active: Optional[bool] = None

    @field_validator('email')
    @classmethod
    def validate_email(cls, value):
        return normalize_email(value) if value is not None else value
