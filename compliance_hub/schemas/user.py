# compliance_hub/schemas/user.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from datetime import datetime
from typing import Optional


class UserBase(BaseModel):
    """Base user schema"""

    email: EmailStr = Field(..., description="User email address")
    full_name: str = Field(..., max_length=200, description="Full name")
    role: str = Field(..., max_length=50, description="Platform role")


class UserResponse(UserBase):
    """Schema for user responses"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    is_active: bool
    is_admin: bool
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None
