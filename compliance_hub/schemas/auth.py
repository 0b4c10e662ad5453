# compliance_hub/schemas/auth.py
from pydantic import BaseModel, EmailStr, Field

from compliance_hub.models.enums import UserRole


class LoginRequest(BaseModel):
    """Standard login with email and password"""

    email: EmailStr
    password: str


class SignupRequest(BaseModel):
    """Signup with email and password"""

    email: EmailStr
    password: str = Field(
        ..., min_length=8, description="Password must be at least 8 characters"
    )
    full_name: str = Field(..., min_length=2, max_length=200)
    role: UserRole = UserRole.STARTUP


class TokenRefreshRequest(BaseModel):
    """Request to refresh access token"""

    refresh_token: str


class TokenResponse(BaseModel):
    """Standard token response for all auth endpoints"""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int
    user: dict
