# compliance_hub/schemas/submission.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from typing import Any, Optional

from compliance_hub.models.enums import OperationType, SubmissionStatus
from compliance_hub.services.normalization import (
    normalize_frequency,
    normalize_verification,
)


class SubmissionCreate(BaseModel):
    """A user's proposal for a new compliance obligation"""

    company_name: str = Field(..., max_length=200)
    company_type: str = Field(..., max_length=200)
    operation_type: OperationType = OperationType.PARENT
    country_code: str = Field(..., min_length=1, max_length=10)
    country_name: str = Field(..., min_length=1, max_length=100)
    ca_type: Optional[str] = Field(None, max_length=100)
    cs_type: Optional[str] = Field(None, max_length=100)
    compliance_name: str = Field(..., max_length=300)
    compliance_description: Optional[str] = None
    frequency: str = "annual"
    verification_required: str = "both"
    justification: Optional[str] = None
    regulatory_reference: Optional[str] = Field(None, max_length=500)

    @field_validator(
        "company_name", "company_type", "country_code", "country_name", "compliance_name"
    )
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency_value(cls, value: Any) -> str:
        return normalize_frequency(value)[0]

    @field_validator("verification_required", mode="before")
    @classmethod
    def normalize_verification_value(cls, value: Any) -> str:
        return normalize_verification(value)[0]


class SubmissionStatusUpdate(BaseModel):
    """Admin review decision"""

    status: SubmissionStatus
    review_notes: Optional[str] = None


class ReviewNotes(BaseModel):
    review_notes: Optional[str] = None


class SubmissionResponse(BaseModel):
    """Schema for submission responses"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    submitted_by_user_id: int
    submitted_by_name: str
    submitted_by_email: str
    submitted_by_role: str
    company_name: str
    company_type: str
    operation_type: str
    country_code: str
    country_name: str
    ca_type: Optional[str] = None
    cs_type: Optional[str] = None
    compliance_name: str
    compliance_description: Optional[str] = None
    frequency: str
    verification_required: str
    justification: Optional[str] = None
    regulatory_reference: Optional[str] = None
    status: str
    reviewed_by_user_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    promoted_rule_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubmissionStats(BaseModel):
    total: int
    pending: int
    approved: int
    rejected: int
    under_review: int
