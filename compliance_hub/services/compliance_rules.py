# compliance_hub/services/compliance_rules.py - Rule store queries and admin writes

import logging
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from compliance_hub.core.exceptions import (
    ComplianceHubError,
    NotFoundError,
    ValidationError,
)
from compliance_hub.models.compliance_rule import ComplianceRule
from compliance_hub.models.country import Country
from compliance_hub.models.enums import (
    CA_SETUP_SENTINEL,
    CS_SETUP_SENTINEL,
    Frequency,
    VerificationRequired,
)
from compliance_hub.schemas.compliance_rule import (
    ComplianceRuleCreate,
    ComplianceRuleUpdate,
)
from compliance_hub.services.rule_import import ImportResult, parse_rule_file

logger = logging.getLogger(__name__)

# Substrings that mark a company type as country setup metadata
SETUP_MARKERS = ("setup", "ca type", "cs type")

NON_NULLABLE_FIELDS = {
    "country_code",
    "country_name",
    "company_type",
    "compliance_name",
    "frequency",
    "verification_required",
}


def is_listed_company_type(
    company_type: Optional[str],
    ca_type: Optional[str] = None,
    cs_type: Optional[str] = None,
) -> bool:
    """Whether a company type is a real one rather than a country setup marker"""
    if not company_type:
        return False
    lowered = company_type.lower()
    if any(marker in lowered for marker in SETUP_MARKERS):
        return False
    if company_type == ca_type or company_type == cs_type:
        return False
    return True


def _unique(values) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


class ComplianceRuleService:
    """Read and write access to the compliance rule store"""

    def __init__(self, db: Session):
        self.db = db

    # ===== QUERIES =====

    def get_all_rules(self) -> List[ComplianceRule]:
        return (
            self.db.query(ComplianceRule)
            .order_by(
                ComplianceRule.country_name,
                ComplianceRule.company_type,
                ComplianceRule.compliance_name,
            )
            .all()
        )

    def get_rules_by_country(self, country_code: str) -> List[ComplianceRule]:
        return (
            self.db.query(ComplianceRule)
            .filter(ComplianceRule.country_code == country_code)
            .order_by(ComplianceRule.company_type, ComplianceRule.compliance_name)
            .all()
        )

    def get_rules_by_company_type(self, company_type: str) -> List[ComplianceRule]:
        return (
            self.db.query(ComplianceRule)
            .filter(ComplianceRule.company_type == company_type)
            .order_by(ComplianceRule.country_name, ComplianceRule.compliance_name)
            .all()
        )

    def get_rules_by_country_and_company_type(
        self, country_code: str, company_type: str
    ) -> List[ComplianceRule]:
        return (
            self.db.query(ComplianceRule)
            .filter(
                ComplianceRule.country_code == country_code,
                ComplianceRule.company_type == company_type,
            )
            .order_by(ComplianceRule.compliance_name)
            .all()
        )

    def get_rules(
        self,
        country_code: Optional[str] = None,
        company_type: Optional[str] = None,
        verification: Optional[str] = None,
    ) -> List[ComplianceRule]:
        """Admin panel listing with any combination of filters"""
        query = self.db.query(ComplianceRule)
        if country_code:
            query = query.filter(ComplianceRule.country_code == country_code)
        if company_type:
            query = query.filter(ComplianceRule.company_type == company_type)
        if verification:
            query = query.filter(ComplianceRule.verification_required == verification)
        return query.order_by(
            ComplianceRule.country_name,
            ComplianceRule.company_type,
            ComplianceRule.compliance_name,
        ).all()

    def get_rule(self, rule_id: int) -> ComplianceRule:
        rule = self.db.query(ComplianceRule).filter(ComplianceRule.id == rule_id).first()
        if not rule:
            raise NotFoundError(f"Compliance rule {rule_id} not found")
        return rule

    def get_countries(self) -> List[Dict[str, str]]:
        """Distinct (country_code, country_name) pairs, one per code, by name"""
        countries: Dict[str, str] = {}

        for country in self.db.query(Country).all():
            countries[country.country_code] = country.country_name

        rows = (
            self.db.query(ComplianceRule.country_code, ComplianceRule.country_name)
            .order_by(ComplianceRule.country_name, ComplianceRule.id)
            .all()
        )
        for code, name in rows:
            countries.setdefault(code, name)

        return sorted(
            (
                {"country_code": code, "country_name": name}
                for code, name in countries.items()
            ),
            key=lambda c: (c["country_name"], c["country_code"]),
        )

    def get_company_types(self, country_code: Optional[str] = None) -> List[str]:
        """Distinct company types, without country setup rows"""
        query = self.db.query(
            ComplianceRule.company_type,
            ComplianceRule.ca_type,
            ComplianceRule.cs_type,
        )
        if country_code:
            query = query.filter(ComplianceRule.country_code == country_code)

        rows = query.order_by(ComplianceRule.company_type).all()
        return _unique(
            company_type
            for company_type, ca_type, cs_type in rows
            if is_listed_company_type(company_type, ca_type, cs_type)
        )

    def get_company_types_by_country(self, country_code: str) -> List[str]:
        return self.get_company_types(country_code=country_code)

    def get_ca_types(self) -> List[str]:
        rows = (
            self.db.query(ComplianceRule.ca_type)
            .filter(ComplianceRule.ca_type.isnot(None), ComplianceRule.ca_type != "")
            .order_by(ComplianceRule.ca_type)
            .all()
        )
        return _unique(row[0] for row in rows)

    def get_cs_types(self) -> List[str]:
        rows = (
            self.db.query(ComplianceRule.cs_type)
            .filter(ComplianceRule.cs_type.isnot(None), ComplianceRule.cs_type != "")
            .order_by(ComplianceRule.cs_type)
            .all()
        )
        return _unique(row[0] for row in rows)

    def get_ca_type_by_country(self, country_code: str) -> Optional[str]:
        """
        The country's CA designation.

        The Country record wins; otherwise the label of the oldest rule for
        the country that has one.
        """
        country = self.db.get(Country, country_code)
        if country and country.ca_type:
            return country.ca_type

        row = (
            self.db.query(ComplianceRule.ca_type)
            .filter(
                ComplianceRule.country_code == country_code,
                ComplianceRule.ca_type.isnot(None),
                ComplianceRule.ca_type != "",
            )
            .order_by(ComplianceRule.id)
            .first()
        )
        return row[0] if row else None

    def get_cs_type_by_country(self, country_code: str) -> Optional[str]:
        """The country's CS designation, resolved like get_ca_type_by_country"""
        country = self.db.get(Country, country_code)
        if country and country.cs_type:
            return country.cs_type

        row = (
            self.db.query(ComplianceRule.cs_type)
            .filter(
                ComplianceRule.country_code == country_code,
                ComplianceRule.cs_type.isnot(None),
                ComplianceRule.cs_type != "",
            )
            .order_by(ComplianceRule.id)
            .first()
        )
        return row[0] if row else None

    def get_store_stats(self) -> Dict[str, int]:
        total_rules = self.db.query(ComplianceRule).count()
        setup_rows = (
            self.db.query(ComplianceRule)
            .filter(
                ComplianceRule.compliance_name.in_(
                    [CA_SETUP_SENTINEL, CS_SETUP_SENTINEL]
                )
            )
            .count()
        )
        return {
            "total_rules": total_rules,
            "obligations": total_rules - setup_rows,
            "setup_rows": setup_rows,
            "countries": len(self.get_countries()),
            "company_types": len(self.get_company_types()),
        }

    # ===== ADMIN WRITES =====

    def add_rule(self, rule_in: ComplianceRuleCreate) -> ComplianceRule:
        rule = ComplianceRule(**rule_in.model_dump())
        try:
            self.db.add(rule)
            self.db.commit()
            self.db.refresh(rule)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to add compliance rule '{rule_in.compliance_name}': {e}")
            raise

        logger.info(
            f"Added compliance rule {rule.id}: {rule.country_code} / "
            f"{rule.company_type} / {rule.compliance_name}"
        )
        return rule

    def update_rule(self, rule_id: int, rule_in: ComplianceRuleUpdate) -> ComplianceRule:
        rule = self.get_rule(rule_id)

        changes = rule_in.model_dump(exclude_unset=True)
        for field_name, value in changes.items():
            if value is None and field_name in NON_NULLABLE_FIELDS:
                continue
            setattr(rule, field_name, value)

        try:
            self.db.commit()
            self.db.refresh(rule)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update compliance rule {rule_id}: {e}")
            raise

        logger.info(f"Updated compliance rule {rule_id}: {sorted(changes)}")
        return rule

    def delete_rule(self, rule_id: int) -> bool:
        rule = self.get_rule(rule_id)
        try:
            self.db.delete(rule)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to delete compliance rule {rule_id}: {e}")
            raise

        logger.info(f"Deleted compliance rule {rule_id}")
        return True

    def add_country_with_types(
        self,
        country_code: str,
        country_name: str,
        ca_types: List[str],
        cs_types: List[str],
    ) -> List[ComplianceRule]:
        """
        Register a country and its professional designations.

        Upserts the Country record (first CA and CS label) and writes one
        setup row per label so rule-based discovery finds them too.
        """
        country_code = country_code.strip().upper()
        country_name = country_name.strip()
        ca_types = _unique(t.strip() for t in ca_types)
        cs_types = _unique(t.strip() for t in cs_types)

        if not country_code or not country_name or not ca_types or not cs_types:
            raise ValidationError(
                "Please fill in country code, name, and at least one CA type and one CS type."
            )

        setup_rows = []
        for ca_type in ca_types:
            setup_rows.append(
                ComplianceRule(
                    country_code=country_code,
                    country_name=country_name,
                    ca_type=ca_type,
                    company_type=CA_SETUP_SENTINEL,
                    compliance_name=CA_SETUP_SENTINEL,
                    compliance_description=f"Setup entry for CA type: {ca_type} in {country_name}",
                    frequency=Frequency.ANNUAL.value,
                    verification_required=VerificationRequired.CA.value,
                )
            )
        for cs_type in cs_types:
            setup_rows.append(
                ComplianceRule(
                    country_code=country_code,
                    country_name=country_name,
                    cs_type=cs_type,
                    company_type=CS_SETUP_SENTINEL,
                    compliance_name=CS_SETUP_SENTINEL,
                    compliance_description=f"Setup entry for CS type: {cs_type} in {country_name}",
                    frequency=Frequency.ANNUAL.value,
                    verification_required=VerificationRequired.CS.value,
                )
            )

        try:
            country = self.db.get(Country, country_code)
            if country is None:
                country = Country(country_code=country_code)
                self.db.add(country)
            country.country_name = country_name
            country.ca_type = ca_types[0]
            country.cs_type = cs_types[0]

            self.db.add_all(setup_rows)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to add country {country_code}: {e}")
            raise

        logger.info(
            f"Added country {country_code} ({country_name}) with CA types {ca_types} "
            f"and CS types {cs_types}"
        )
        return setup_rows

    # ===== BULK IMPORT =====

    def bulk_upload_rules(self, content: bytes, filename: str) -> ImportResult:
        """
        Import rules from an uploaded CSV or Excel file.

        Rows are inserted one at a time; a failing row is recorded and the
        rest still go in. Returns {success, errors, warnings, skipped}.
        """
        parsed = parse_rule_file(content, filename)
        result = ImportResult(
            errors=list(parsed.errors), warnings=parsed.warnings, skipped=parsed.skipped
        )

        for row_number, data in parsed.rows:
            try:
                self.add_rule(ComplianceRuleCreate(**data))
                result.success += 1
            except Exception as e:
                message = e.message if isinstance(e, ComplianceHubError) else str(e)
                logger.error(f"Error processing row {row_number}: {message}")
                result.errors.append({"row": row_number, "error": message, "data": data})

        logger.info(
            f"Bulk upload of {filename} finished: {result.success} inserted, "
            f"{len(result.errors)} errors, {result.skipped} skipped"
        )
        return result

    def preview_import(self, content: bytes, filename: str) -> ImportResult:
        """Parse and validate a rule file without writing anything"""
        parsed = parse_rule_file(content, filename)
        result = ImportResult(
            errors=list(parsed.errors), warnings=parsed.warnings, skipped=parsed.skipped
        )

        for row_number, data in parsed.rows:
            try:
                ComplianceRuleCreate(**data)
                result.success += 1
            except ValueError as e:
                result.errors.append({"row": row_number, "error": str(e), "data": data})

        return result
