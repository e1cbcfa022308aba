from typing import Optional
from pydantic import BaseModel, EmailStr, field_validator, model_validator

from studio_dashboard.schemas.auth.user import User, UserRole

# Mirrors settings.PASSWORD_MIN_LENGTH; RegisterForm enforces the configured value
MIN_PASSWORD_LENGTH = 6


class LoginRequest(BaseModel):
    username: str
    password: str

    @field_validator("username")
    def validate_username(cls, v):
        if not v or not v.strip():
            raise ValueError("Username is required")
        return v.strip()


class RegisterRequest(BaseModel):
    username: str
    email: Optional[EmailStr] = None
    full_name: str
    password: str
    confirm_password: str
    role: UserRole = UserRole.EMPLOYEE

    @field_validator("username", "full_name")
    def validate_required(cls, v):
        if not v or not v.strip():
            raise ValueError("Field is required")
        return v.strip()

    @field_validator("email", mode="before")
    def empty_email_to_none(cls, v):
        return v or None

    @model_validator(mode="after")
    def validate_passwords(self):
        if self.password != self.confirm_password:
            raise ValueError("Mật khẩu xác nhận không khớp")
        if len(self.password) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Mật khẩu phải có ít nhất {MIN_PASSWORD_LENGTH} ký tự")
        return self

    def to_backend(self) -> dict:
        """Payload for POST /auth/register (no confirmation field)"""
        return self.model_dump(mode="json", exclude={"confirm_password"})


class AuthResponse(BaseModel):
    success: bool = False
    token: Optional[str] = None
    message: Optional[str] = None
    user: Optional[User] = None


class AuthStateResponse(BaseModel):
    user: Optional[User] = None
    is_authenticated: bool = False
    is_loading: bool = False
    error: Optional[str] = None
