# app/models/auth_models.py
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from pydantic import Field

from app.models.common import CamelModel, NonEmptyStr, new_id, utc_now


def default_avatar(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=1976d2&color=fff"


class UserRecord(CamelModel):
    id: str = Field(default_factory=new_id)
    email: str
    name: str
    password_hash: Optional[str] = None
    provider: str = "email"
    verified: bool = False
    avatar: Optional[str] = None
    verification_code: Optional[str] = None
    verification_expiry: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class UserPublic(CamelModel):
    id: str
    email: str
    name: str
    provider: str = "email"
    verified: bool = False
    avatar: Optional[str] = None
    created_at: Optional[datetime] = None


class SignupRequest(CamelModel):
    email: NonEmptyStr
    password: str
    name: NonEmptyStr


class SigninRequest(CamelModel):
    email: NonEmptyStr
    password: str


class VerificationRequest(CamelModel):
    email: NonEmptyStr
    name: Optional[str] = None


class VerifyCodeRequest(CamelModel):
    email: NonEmptyStr
    code: NonEmptyStr


class OAuthProfile(CamelModel):
    email: NonEmptyStr
    name: Optional[str] = None
    avatar: Optional[str] = None


class TokenData(CamelModel):
    sub: str
    email: Optional[str] = None
    name: Optional[str] = None


class AuthResponse(CamelModel):
    success: bool = True
    token: str
    user: UserPublic


class TokenResponse(CamelModel):
    success: bool = True
    token: str
