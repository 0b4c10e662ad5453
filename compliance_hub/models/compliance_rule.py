# compliance_hub/models/compliance_rule.py
from sqlalchemy import Column, Integer, String, Text, DateTime, Index
from sqlalchemy.sql import func
from compliance_hub.core.database import Base
from compliance_hub.models.enums import (
    Frequency,
    VerificationRequired,
    SETUP_SENTINELS,
)


class ComplianceRule(Base):
    __tablename__ = "compliance_rules_comprehensive"

    id = Column(Integer, primary_key=True, index=True)

    # Jurisdiction
    country_code = Column(String(10), nullable=False, index=True)
    country_name = Column(String(100), nullable=False)

    # Professional designations for this jurisdiction
    ca_type = Column(String(100), nullable=True)
    cs_type = Column(String(100), nullable=True)

    # Obligation
    company_type = Column(String(200), nullable=False)
    compliance_name = Column(String(300), nullable=False)
    compliance_description = Column(Text, nullable=True)
    frequency = Column(String(20), nullable=False, default=Frequency.ANNUAL.value)
    verification_required = Column(
        String(10), nullable=False, default=VerificationRequired.BOTH.value
    )

    # System
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_rule_country_company_type", "country_code", "company_type"),
    )

    def __repr__(self):
        return (
            f"<ComplianceRule(id={self.id}, country='{self.country_code}', "
            f"company_type='{self.company_type}', name='{self.compliance_name}')>"
        )

    @property
    def is_country_setup(self) -> bool:
        """True for rows that only carry a country's CA/CS label"""
        return (
            self.company_type in SETUP_SENTINELS
            or self.compliance_name in SETUP_SENTINELS
        )
