from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

# ======================
# TOKEN SCHEMAS
# ======================

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: Optional[datetime] = None

class TokenData(BaseModel):
    user_id: Optional[str] = None
    jti: Optional[str] = None
    expires_at: Optional[datetime] = None


# ======================
# USER AUTHENTICATION SCHEMAS
# ======================

class SignUpRequest(BaseModel):
    email: EmailStr
    # Bcrypt limit is 72 bytes
    password: str = Field(..., min_length=6, max_length=72)
    full_name: str = Field(..., min_length=1, max_length=100)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class ResendVerificationRequest(BaseModel):
    email: EmailStr


class UserOut(BaseModel):
    id: str
    email: str
    full_name: str
    email_verified: bool = False

    model_config = ConfigDict(from_attributes=True)


# ======================
# AUTH PROVIDER RESULTS
# ======================

class AuthResponse(BaseModel):
    user: Optional[UserOut] = None
    access_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[datetime] = None
    needs_email_verification: bool = False
    error: Optional[str] = None


class SessionInfo(BaseModel):
    user: Optional[UserOut] = None
    expires_at: Optional[datetime] = None
    error: Optional[str] = None
