# compliance_hub/schemas/compliance_rule.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from datetime import datetime
from typing import Any, Dict, List, Optional

from compliance_hub.services.normalization import (
    normalize_frequency,
    normalize_verification,
)


def _strip_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class ComplianceRuleBase(BaseModel):
    """Base compliance rule schema"""

    country_code: str = Field(
        ..., min_length=1, max_length=10, description="ISO country code"
    )
    country_name: str = Field(..., min_length=1, max_length=100)
    ca_type: Optional[str] = Field(
        None, max_length=100, description="Local CA-equivalent designation"
    )
    cs_type: Optional[str] = Field(
        None, max_length=100, description="Local CS-equivalent designation"
    )
    company_type: str = Field(
        ..., min_length=1, max_length=200, description="e.g. Private Limited"
    )
    compliance_name: str = Field(..., min_length=1, max_length=300)
    compliance_description: Optional[str] = None
    frequency: str = Field(
        "annual", description="first-year, monthly, quarterly or annual"
    )
    verification_required: str = Field("both", description="CA, CS or both")

    @field_validator(
        "country_code", "country_name", "company_type", "compliance_name"
    )
    @classmethod
    def strip_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("ca_type", "cs_type", "compliance_description")
    @classmethod
    def strip_optional(cls, value: Optional[str]) -> Optional[str]:
        return _strip_optional(value)

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency_value(cls, value: Any) -> str:
        return normalize_frequency(value)[0]

    @field_validator("verification_required", mode="before")
    @classmethod
    def normalize_verification_value(cls, value: Any) -> str:
        return normalize_verification(value)[0]


class ComplianceRuleCreate(ComplianceRuleBase):
    """Schema for creating a compliance rule"""


class ComplianceRuleUpdate(BaseModel):
    """Schema for updating a compliance rule; only supplied fields are written"""

    country_code: Optional[str] = Field(None, min_length=1, max_length=10)
    country_name: Optional[str] = Field(None, min_length=1, max_length=100)
    ca_type: Optional[str] = Field(None, max_length=100)
    cs_type: Optional[str] = Field(None, max_length=100)
    company_type: Optional[str] = Field(None, min_length=1, max_length=200)
    compliance_name: Optional[str] = Field(None, min_length=1, max_length=300)
    compliance_description: Optional[str] = None
    frequency: Optional[str] = None
    verification_required: Optional[str] = None

    @field_validator("frequency", mode="before")
    @classmethod
    def normalize_frequency_value(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return normalize_frequency(value)[0]

    @field_validator("verification_required", mode="before")
    @classmethod
    def normalize_verification_value(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        return normalize_verification(value)[0]


class ComplianceRuleResponse(BaseModel):
    """Schema for compliance rule responses"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    country_code: str
    country_name: str
    ca_type: Optional[str] = None
    cs_type: Optional[str] = None
    company_type: str
    compliance_name: str
    compliance_description: Optional[str] = None
    frequency: str
    verification_required: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CountrySummary(BaseModel):
    """Distinct country entry"""

    country_code: str
    country_name: str


class CountrySetupRequest(BaseModel):
    """Register a country together with its CA and CS designations"""

    country_code: str = Field(..., min_length=1, max_length=10)
    country_name: str = Field(..., min_length=1, max_length=100)
    ca_types: List[str] = Field(..., min_length=1)
    cs_types: List[str] = Field(..., min_length=1)


class NormalizationWarningResponse(BaseModel):
    row: int
    field: str
    value: Optional[str] = None
    message: str


class ImportRowError(BaseModel):
    row: int
    error: str
    data: Optional[Dict[str, Any]] = None


class BulkUploadResponse(BaseModel):
    """Result of a bulk rule import; partial success is a normal outcome"""

    success: int
    errors: List[ImportRowError]
    warnings: List[NormalizationWarningResponse]
    skipped: int
