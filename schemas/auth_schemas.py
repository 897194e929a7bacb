from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
import re
from schemas.validators import check_password_strength, normalize_email, normalize_phone_number, require_text


class EmailRequest(BaseModel):
    email: EmailStr

    @field_validator('email')
    @classmethod
    def validate_email(cls, value):
        return normalize_email(value)


class SignupRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    username: str
    password: str
    confirm_password: str = Field(alias="confirmPassword")
    address: str
    building_name: Optional[str] = None
    phone_number: str

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

    @field_validator('phone_number')
    @classmethod
    def validate_phone(cls, value):
        return normalize_phone_number(value)

    @model_validator(mode='after')
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError('Passwords do not match')
        return self


class LoginRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    password: str = Field(min_length=1)
    is_admin: bool = Field(default=False, alias="isAdmin")

    @field_validator('email')
    @classmethod
    def validate_email(cls, value):
        return normalize_email(value)


class VerifyCodeRequest(BaseModel):
    email: EmailStr
    code: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value):
        return normalize_email(value)

    @field_validator('code')
    @classmethod
    def validate_code(cls, value):
        value = value.strip().lower()
        if not re.fullmatch(r'[0-9a-f]{32}', value):
            raise ValueError('must be a 32-character code')
        return value


class FindEmailRequest(BaseModel):
    name: str
    phone: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, value):
        return require_text(value)

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, value):
        return normalize_phone_number(value)


class PasswordResetVerifyRequest(VerifyCodeRequest):
    model_config = ConfigDict(populate_by_name=True)

    new_password: str = Field(alias="newPassword")

    @field_validator('new_password')
    @classmethod
    def validate_password(cls, value):
        return check_password_strength(value)


class UserInfo(BaseModel):
    id: int
    email: str
    username: Optional[str] = None
    isAdmin: bool


class LoginResponse(BaseModel):
    message: str
    accessToken: str
    userInfo: UserInfo


class AccessTokenResponse(BaseModel):
    message: str
    accessToken: str
