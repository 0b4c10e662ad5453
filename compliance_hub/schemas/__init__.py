# compliance_hub/schemas/__init__.py
"""
Pydantic schemas for FastAPI request/response validation

This module contains all the Pydantic models used for:
- Request validation
- Response serialization
- API documentation
"""

# Compliance rule schemas
from .compliance_rule import (
    ComplianceRuleBase,
    ComplianceRuleCreate,
    ComplianceRuleUpdate,
    ComplianceRuleResponse,
    CountrySummary,
    CountrySetupRequest,
    NormalizationWarningResponse,
    ImportRowError,
    BulkUploadResponse,
)

# Submission schemas
from .submission import (
    SubmissionCreate,
    SubmissionStatusUpdate,
    ReviewNotes,
    SubmissionResponse,
    SubmissionStats,
)

# Country schemas
from .country import (
    CountryComplianceInfo,
    ComplianceProfileRequest,
    ComplianceProfileValidation,
    ComplianceDashboard,
)

# User schemas
from .user import UserBase, UserResponse

# Auth schemas
from .auth import (
    LoginRequest,
    SignupRequest,
    TokenRefreshRequest,
    TokenResponse,
)

__all__ = [
    # Compliance rules
    "ComplianceRuleBase",
    "ComplianceRuleCreate",
    "ComplianceRuleUpdate",
    "ComplianceRuleResponse",
    "CountrySummary",
    "CountrySetupRequest",
    "NormalizationWarningResponse",
    "ImportRowError",
    "BulkUploadResponse",
    # Submissions
    "SubmissionCreate",
    "SubmissionStatusUpdate",
    "ReviewNotes",
    "SubmissionResponse",
    "SubmissionStats",
    # Countries
    "CountryComplianceInfo",
    "ComplianceProfileRequest",
    "ComplianceProfileValidation",
    "ComplianceDashboard",
    # User
    "UserBase",
    "UserResponse",
    # Auth
    "LoginRequest",
    "SignupRequest",
    "TokenRefreshRequest",
    "TokenResponse",
]
