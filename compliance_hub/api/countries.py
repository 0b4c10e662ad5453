from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from compliance_hub.core.database import get_db
from compliance_hub.schemas.country import (
    ComplianceDashboard,
    ComplianceProfileRequest,
    ComplianceProfileValidation,
    CountryComplianceInfo,
)
from compliance_hub.services.country_info import UserComplianceService

router = APIRouter(prefix="/api/countries", tags=["Countries"])


@router.get("/", response_model=List[CountryComplianceInfo])
async def get_available_countries(db: Session = Depends(get_db)):
    """Countries offered at registration, each with its CA and CS designation"""
    return UserComplianceService(db).get_available_countries()


@router.get("/resolve", response_model=CountryComplianceInfo)
async def resolve_country(country: str, db: Session = Depends(get_db)):
    """Look up designations by country code or name"""
    info = UserComplianceService(db).resolve_country(country)
    if not info:
        raise HTTPException(
            status_code=404, detail=f"No CA/CS mapping found for {country}"
        )
    return info


@router.post("/validate-profile", response_model=ComplianceProfileValidation)
async def validate_profile(
    request: ComplianceProfileRequest, db: Session = Depends(get_db)
):
    return UserComplianceService(db).validate_user_compliance_profile(
        country=request.country,
        company_type=request.company_type,
        ca_type=request.ca_type,
        cs_type=request.cs_type,
    )


@router.get("/{country_code}", response_model=CountryComplianceInfo)
async def get_country(country_code: str, db: Session = Depends(get_db)):
    info = UserComplianceService(db).get_country_compliance_info(country_code)
    if not info:
        raise HTTPException(status_code=404, detail=f"Country {country_code} not found")
    return info


@router.get("/{country_code}/dashboard", response_model=ComplianceDashboard)
async def get_dashboard(
    country_code: str, company_type: str, db: Session = Depends(get_db)
):
    """Obligations plus the CA/CS designations for a company profile"""
    return UserComplianceService(db).get_user_compliance_dashboard(
        country_code, company_type
    )
