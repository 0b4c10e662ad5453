from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from compliance_hub.core.config import settings
from compliance_hub.core.database import get_db
from compliance_hub.models.enums import VerificationRequired
from compliance_hub.models.user import User
from compliance_hub.schemas.compliance_rule import (
    BulkUploadResponse,
    ComplianceRuleCreate,
    ComplianceRuleResponse,
    ComplianceRuleUpdate,
    CountrySetupRequest,
    CountrySummary,
)
from compliance_hub.services.compliance_rules import ComplianceRuleService
from compliance_hub.services.jwt_service import get_current_admin_user
from compliance_hub.services.rule_import import SAMPLE_FILENAME, generate_sample_csv

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/compliance-rules", tags=["Compliance Rules"])


# ===== QUERIES =====


@router.get("/", response_model=List[ComplianceRuleResponse])
async def list_rules(
    country_code: Optional[str] = None,
    company_type: Optional[str] = None,
    verification: Optional[VerificationRequired] = None,
    db: Session = Depends(get_db),
):
    """All rules by country, company type and name, optionally filtered"""
    service = ComplianceRuleService(db)
    if not (country_code or company_type or verification):
        return service.get_all_rules()
    return service.get_rules(
        country_code=country_code,
        company_type=company_type,
        verification=verification.value if verification else None,
    )


@router.get("/countries", response_model=List[CountrySummary])
async def list_countries(db: Session = Depends(get_db)):
    """Distinct countries known to the rule store"""
    return ComplianceRuleService(db).get_countries()


@router.get("/company-types", response_model=List[str])
async def list_company_types(
    country_code: Optional[str] = None, db: Session = Depends(get_db)
):
    """Distinct company types, optionally for one country"""
    return ComplianceRuleService(db).get_company_types(country_code=country_code)


@router.get("/ca-types", response_model=List[str])
async def list_ca_types(db: Session = Depends(get_db)):
    return ComplianceRuleService(db).get_ca_types()


@router.get("/cs-types", response_model=List[str])
async def list_cs_types(db: Session = Depends(get_db)):
    return ComplianceRuleService(db).get_cs_types()


@router.get("/countries/{country_code}/ca-type")
async def get_country_ca_type(country_code: str, db: Session = Depends(get_db)):
    return {
        "country_code": country_code,
        "ca_type": ComplianceRuleService(db).get_ca_type_by_country(country_code),
    }


@router.get("/countries/{country_code}/cs-type")
async def get_country_cs_type(country_code: str, db: Session = Depends(get_db)):
    return {
        "country_code": country_code,
        "cs_type": ComplianceRuleService(db).get_cs_type_by_country(country_code),
    }


@router.get("/by-country/{country_code}", response_model=List[ComplianceRuleResponse])
async def get_rules_by_country(country_code: str, db: Session = Depends(get_db)):
    return ComplianceRuleService(db).get_rules_by_country(country_code)


@router.get(
    "/by-company-type/{company_type}", response_model=List[ComplianceRuleResponse]
)
async def get_rules_by_company_type(company_type: str, db: Session = Depends(get_db)):
    return ComplianceRuleService(db).get_rules_by_company_type(company_type)


@router.get(
    "/by-country/{country_code}/company-type/{company_type}",
    response_model=List[ComplianceRuleResponse],
)
async def get_rules_by_country_and_company_type(
    country_code: str, company_type: str, db: Session = Depends(get_db)
):
    """Obligations that apply to a company of this type in this country"""
    return ComplianceRuleService(db).get_rules_by_country_and_company_type(
        country_code, company_type
    )


@router.get("/sample-file")
async def download_sample_file():
    """CSV template for bulk upload"""
    return Response(
        content=generate_sample_csv(),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{SAMPLE_FILENAME}"'},
    )


@router.get("/stats/summary")
async def get_rule_stats(db: Session = Depends(get_db)):
    """Get summary statistics"""
    return ComplianceRuleService(db).get_store_stats()


@router.get("/{rule_id}", response_model=ComplianceRuleResponse)
async def get_rule(rule_id: int, db: Session = Depends(get_db)):
    return ComplianceRuleService(db).get_rule(rule_id)


# ===== ADMIN =====


@router.post(
    "/", response_model=ComplianceRuleResponse, status_code=status.HTTP_201_CREATED
)
async def add_rule(
    rule_in: ComplianceRuleCreate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    logger.info(f"Admin {admin.email} adding rule '{rule_in.compliance_name}'")
    return ComplianceRuleService(db).add_rule(rule_in)


@router.put("/{rule_id}", response_model=ComplianceRuleResponse)
async def update_rule(
    rule_id: int,
    rule_in: ComplianceRuleUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    return ComplianceRuleService(db).update_rule(rule_id, rule_in)


@router.delete("/{rule_id}")
async def delete_rule(
    rule_id: int,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    ComplianceRuleService(db).delete_rule(rule_id)
    return {"success": True, "message": f"Compliance rule {rule_id} deleted"}


@router.post(
    "/countries",
    response_model=List[ComplianceRuleResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_country_with_types(
    request: CountrySetupRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    """Register a country with its CA and CS designations"""
    return ComplianceRuleService(db).add_country_with_types(
        country_code=request.country_code,
        country_name=request.country_name,
        ca_types=request.ca_types,
        cs_types=request.cs_types,
    )


@router.post("/bulk-upload", response_model=BulkUploadResponse)
async def bulk_upload_rules(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin_user),
):
    """
    Import rules from a CSV or Excel file.

    Partial success is a normal outcome: rows that fail are listed in
    ``errors`` and normalization defaults in ``warnings``.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file provided")

    content = await file.read()
    if len(content) > settings.max_import_file_size:
        raise HTTPException(status_code=400, detail="File size exceeds the import limit")

    logger.info(f"Admin {admin.email} uploading rule file {file.filename}")
    result = ComplianceRuleService(db).bulk_upload_rules(content, file.filename)
    return result.to_dict()
