# ============================================================================
# FILE: videotube/schemas/user.py
# ============================================================================
from pydantic import EmailStr
from typing import Optional
from datetime import datetime
from videotube.schemas.base import CamelModel

class UserLogin(CamelModel):
    """Schema for user login; username or email identifies the account"""
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None

class RefreshTokenRequest(CamelModel):
    refresh_token: Optional[str] = None

class PasswordChange(CamelModel):
    old_password: Optional[str] = None
    new_password: Optional[str] = None

class AccountDetailsUpdate(CamelModel):
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None

class UserResponse(CamelModel):
    """Public user fields; password hash and refresh token are never exposed"""
    id: int
    username: str
    email: str
    full_name: str
    avatar: str
    cover_image: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class TokenPair(CamelModel):
    access_token: str
    refresh_token: str

class LoginResponse(TokenPair):
    user: UserResponse

class UserRegister(CamelModel):
    """Text fields of the registration form"""
    full_name: str
    email: EmailStr
    username: str
    password: str
