# compliance_hub/services/submissions.py - User-proposed compliances and their review
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from compliance_hub.core.exceptions import (
    InvalidStatusTransition,
    NotFoundError,
    PromotionError,
    ValidationError,
)
from compliance_hub.models.compliance_rule import ComplianceRule
from compliance_hub.models.enums import STATUS_TRANSITIONS, SubmissionStatus
from compliance_hub.models.submission import UserSubmittedCompliance
from compliance_hub.models.user import User
from compliance_hub.schemas.submission import SubmissionCreate

logger = logging.getLogger(__name__)

DEFAULT_APPROVAL_NOTES = "Approved and promoted to main compliance rules"

REQUIRED_FIELDS = (
    "company_name",
    "company_type",
    "country_code",
    "country_name",
    "compliance_name",
)
OPTIONAL_FIELDS = (
    "ca_type",
    "cs_type",
    "compliance_description",
    "justification",
    "regulatory_reference",
)

# Submission fields copied onto the promoted rule
PROMOTED_FIELDS = (
    "country_code",
    "country_name",
    "ca_type",
    "cs_type",
    "company_type",
    "compliance_name",
    "compliance_description",
    "frequency",
    "verification_required",
)


class UserSubmittedComplianceService:
    """Service for user compliance proposals and the admin review workflow"""

    def __init__(self, db: Session):
        self.db = db

    def submit_compliance(
        self, user: User, submission_in: SubmissionCreate
    ) -> UserSubmittedCompliance:
        """Record a new proposal from any authenticated user as pending"""
        data = submission_in.model_dump()

        missing = [name for name in REQUIRED_FIELDS if not (data.get(name) or "").strip()]
        if missing:
            raise ValidationError("Please fill in all required fields")

        for key, value in data.items():
            if isinstance(value, str):
                data[key] = value.strip()
        for key in OPTIONAL_FIELDS:
            data[key] = data.get(key) or None
        data["operation_type"] = submission_in.operation_type.value

        submission = UserSubmittedCompliance(
            **data,
            submitted_by_user_id=user.id,
            submitted_by_name=user.full_name,
            submitted_by_email=user.email,
            submitted_by_role=user.role,
            status=SubmissionStatus.PENDING.value,
        )

        try:
            self.db.add(submission)
            self.db.commit()
            self.db.refresh(submission)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error submitting compliance for {user.email}: {e}")
            raise

        logger.info(
            f"Compliance submitted: '{submission.compliance_name}' by {user.email} "
            f"(ID: {submission.id})"
        )
        return submission

    def get_all_submissions(
        self, status: Optional[SubmissionStatus] = None
    ) -> List[UserSubmittedCompliance]:
        """All submissions, newest first"""
        query = self.db.query(UserSubmittedCompliance)
        if status is not None:
            query = query.filter(UserSubmittedCompliance.status == status.value)
        return query.order_by(
            UserSubmittedCompliance.created_at.desc(),
            UserSubmittedCompliance.id.desc(),
        ).all()

    def get_my_submissions(self, user: User) -> List[UserSubmittedCompliance]:
        return (
            self.db.query(UserSubmittedCompliance)
            .filter(UserSubmittedCompliance.submitted_by_user_id == user.id)
            .order_by(
                UserSubmittedCompliance.created_at.desc(),
                UserSubmittedCompliance.id.desc(),
            )
            .all()
        )

    def get_submission(self, submission_id: int) -> UserSubmittedCompliance:
        submission = (
            self.db.query(UserSubmittedCompliance)
            .filter(UserSubmittedCompliance.id == submission_id)
            .first()
        )
        if not submission:
            raise NotFoundError(f"Submission {submission_id} not found")
        return submission

    def _check_transition(
        self, submission: UserSubmittedCompliance, requested: SubmissionStatus
    ) -> None:
        current = SubmissionStatus(submission.status)
        if requested not in STATUS_TRANSITIONS[current]:
            raise InvalidStatusTransition(current.value, requested.value)

    def _stamp_review(
        self,
        submission: UserSubmittedCompliance,
        reviewer: User,
        status: SubmissionStatus,
        review_notes: Optional[str],
    ) -> None:
        submission.status = status.value
        submission.review_notes = review_notes
        submission.reviewed_by_user_id = reviewer.id
        submission.reviewed_at = datetime.now(timezone.utc)

    def update_submission_status(
        self,
        submission_id: int,
        reviewer: User,
        status: SubmissionStatus,
        review_notes: Optional[str] = None,
    ) -> UserSubmittedCompliance:
        """
        Move a submission to a new review status.

        Approval always goes through approve_and_promote so an approved
        submission never exists without its rule.
        """
        if status == SubmissionStatus.APPROVED:
            return self.approve_and_promote(submission_id, reviewer, review_notes)

        submission = self.get_submission(submission_id)
        self._check_transition(submission, status)

        try:
            self._stamp_review(submission, reviewer, status, review_notes)
            self.db.commit()
            self.db.refresh(submission)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating submission {submission_id} status: {e}")
            raise

        logger.info(
            f"Submission {submission_id} marked {status.value} by {reviewer.email}"
        )
        return submission

    def approve_and_promote(
        self,
        submission_id: int,
        reviewer: User,
        review_notes: Optional[str] = None,
    ) -> UserSubmittedCompliance:
        """
        Approve a submission and copy it into the compliance rule store.

        The rule insert and the status change commit together; if either
        fails both are rolled back and the submission keeps its status.
        """
        submission = self.get_submission(submission_id)
        self._check_transition(submission, SubmissionStatus.APPROVED)

        rule = ComplianceRule(
            **{name: getattr(submission, name) for name in PROMOTED_FIELDS}
        )

        try:
            self.db.add(rule)
            self.db.flush()

            submission.promoted_rule_id = rule.id
            self._stamp_review(
                submission,
                reviewer,
                SubmissionStatus.APPROVED,
                review_notes or DEFAULT_APPROVAL_NOTES,
            )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error promoting submission {submission_id} to main rules: {e}")
            raise PromotionError("Failed to promote to main compliance rules") from e

        self.db.refresh(submission)
        logger.info(
            f"Submission {submission_id} approved by {reviewer.email}, "
            f"promoted to rule {submission.promoted_rule_id}"
        )
        return submission

    def reject(
        self,
        submission_id: int,
        reviewer: User,
        review_notes: Optional[str] = None,
    ) -> UserSubmittedCompliance:
        return self.update_submission_status(
            submission_id, reviewer, SubmissionStatus.REJECTED, review_notes
        )

    def delete_submission(self, submission_id: int) -> bool:
        """Permanently delete a submission, whatever its status"""
        submission = self.get_submission(submission_id)

        try:
            self.db.delete(submission)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting submission {submission_id}: {e}")
            raise

        logger.warning(f"Submission {submission_id} deleted")
        return True

    def get_submission_stats(self) -> Dict[str, int]:
        statuses = Counter(
            row[0] for row in self.db.query(UserSubmittedCompliance.status).all()
        )
        return {
            "total": sum(statuses.values()),
            "pending": statuses[SubmissionStatus.PENDING.value],
            "approved": statuses[SubmissionStatus.APPROVED.value],
            "rejected": statuses[SubmissionStatus.REJECTED.value],
            "under_review": statuses[SubmissionStatus.UNDER_REVIEW.value],
        }
