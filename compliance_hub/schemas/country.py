# compliance_hub/schemas/country.py
from pydantic import BaseModel, Field
from typing import List, Optional

from compliance_hub.schemas.compliance_rule import ComplianceRuleResponse


class CountryComplianceInfo(BaseModel):
    """A country with its single CA and CS designation"""

    country_code: str
    country_name: str
    ca_type: Optional[str] = None
    cs_type: Optional[str] = None


class ComplianceProfileRequest(BaseModel):
    """Profile a user picked during registration"""

    country: str = Field(..., min_length=1, description="Country code")
    company_type: str = Field(..., min_length=1)
    ca_type: Optional[str] = None
    cs_type: Optional[str] = None


class ComplianceProfileValidation(BaseModel):
    valid: bool
    errors: List[str]


class ComplianceDashboard(BaseModel):
    """Obligations and designations for a country + company type"""

    compliance_rules: List[ComplianceRuleResponse]
    ca_type: Optional[str] = None
    cs_type: Optional[str] = None
    country_name: str
