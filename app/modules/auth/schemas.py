from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class OTPRequest(BaseModel):
    email: EmailStr


class OTPRequestResponse(BaseModel):
    email: str
    message: str


class VerifyOTPRequest(BaseModel):
    email: EmailStr
    code: str = Field(pattern=r"^\d{6}$")


class RefreshRequest(BaseModel):
    refresh_token: str


class Identity(BaseModel):
    id: str
    email: Optional[str] = None
    email_confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    last_sign_in_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user: Identity


class AccountDeletionResponse(BaseModel):
    status: str  # deleted | scheduled
    message: str
