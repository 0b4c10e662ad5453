from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Text,
    ForeignKey,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from compliance_hub.core.database import Base
from compliance_hub.models.enums import (
    Frequency,
    VerificationRequired,
    OperationType,
    SubmissionStatus,
)


class UserSubmittedCompliance(Base):
    __tablename__ = "user_submitted_compliances"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # Submitter (copied at submission time)
    submitted_by_user_id = Column(
        Integer, ForeignKey("users.id"), nullable=False, index=True
    )
    submitted_by_name = Column(String(200), nullable=False)
    submitted_by_email = Column(String(255), nullable=False)
    submitted_by_role = Column(String(50), nullable=False)

    # Company the obligation applies to
    company_name = Column(String(200), nullable=False)
    company_type = Column(String(200), nullable=False)
    operation_type = Column(
        String(20), nullable=False, default=OperationType.PARENT.value
    )

    # Jurisdiction
    country_code = Column(String(10), nullable=False)
    country_name = Column(String(100), nullable=False)
    ca_type = Column(String(100), nullable=True)
    cs_type = Column(String(100), nullable=True)

    # Proposed obligation
    compliance_name = Column(String(300), nullable=False)
    compliance_description = Column(Text, nullable=True)
    frequency = Column(String(20), nullable=False, default=Frequency.ANNUAL.value)
    verification_required = Column(
        String(10), nullable=False, default=VerificationRequired.BOTH.value
    )
    justification = Column(Text, nullable=True)
    regulatory_reference = Column(String(500), nullable=True)

    # Review
    status = Column(
        String(20),
        nullable=False,
        default=SubmissionStatus.PENDING.value,
        index=True,
    )
    reviewed_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    review_notes = Column(Text, nullable=True)

    # Rule created when this submission was approved
    promoted_rule_id = Column(
        Integer,
        ForeignKey("compliance_rules_comprehensive.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    submitted_by = relationship("User", foreign_keys=[submitted_by_user_id])
    reviewed_by = relationship("User", foreign_keys=[reviewed_by_user_id])
    promoted_rule = relationship("ComplianceRule")

    def __repr__(self):
        return f"<UserSubmittedCompliance(id={self.id}, name='{self.compliance_name}', status='{self.status}')>"
