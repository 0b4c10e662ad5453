from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from compliance_hub.core.database import get_db
from compliance_hub.models.enums import SubmissionStatus
from compliance_hub.models.user import User
from compliance_hub.schemas.submission import (
    ReviewNotes,
    SubmissionCreate,
    SubmissionResponse,
    SubmissionStats,
    SubmissionStatusUpdate,
)
from compliance_hub.services.jwt_service import get_current_admin_user, get_current_user
from compliance_hub.services.submissions import UserSubmittedComplianceService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/compliance-submissions", tags=["Compliance Submissions"])


@router.post(
    "/", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED
)
async def submit_compliance(
    submission_in: SubmissionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Propose a compliance obligation for admin review"""
    return UserSubmittedComplianceService(db).submit_compliance(
        current_user, submission_in
    )


@router.get("/mine", response_model=List[SubmissionResponse])
async def get_my_submissions(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    return UserSubmittedComplianceService(db).get_my_submissions(current_user)


# ===== ADMIN REVIEW =====


@router.get("/", response_model=List[SubmissionResponse])
async def get_all_submissions(
    status: Optional[SubmissionStatus] = None,
    admin: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    """All submissions, newest first"""
    return UserSubmittedComplianceService(db).get_all_submissions(status=status)


@router.get("/stats", response_model=SubmissionStats)
async def get_submission_stats(
    admin: User = Depends(get_current_admin_user), db: Session = Depends(get_db)
):
    return UserSubmittedComplianceService(db).get_submission_stats()


@router.get("/{submission_id}", response_model=SubmissionResponse)
async def get_submission(
    submission_id: int,
    admin: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    return UserSubmittedComplianceService(db).get_submission(submission_id)


@router.patch("/{submission_id}/status", response_model=SubmissionResponse)
async def update_submission_status(
    submission_id: int,
    update: SubmissionStatusUpdate,
    admin: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    """Move a submission through review; approving also promotes it"""
    return UserSubmittedComplianceService(db).update_submission_status(
        submission_id, admin, update.status, update.review_notes
    )


@router.post("/{submission_id}/approve", response_model=SubmissionResponse)
async def approve_submission(
    submission_id: int,
    notes: Optional[ReviewNotes] = None,
    admin: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    return UserSubmittedComplianceService(db).approve_and_promote(
        submission_id, admin, notes.review_notes if notes else None
    )


@router.post("/{submission_id}/reject", response_model=SubmissionResponse)
async def reject_submission(
    submission_id: int,
    notes: Optional[ReviewNotes] = None,
    admin: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    return UserSubmittedComplianceService(db).reject(
        submission_id, admin, notes.review_notes if notes else None
    )


@router.delete("/{submission_id}")
async def delete_submission(
    submission_id: int,
    admin: User = Depends(get_current_admin_user),
    db: Session = Depends(get_db),
):
    UserSubmittedComplianceService(db).delete_submission(submission_id)
    logger.info(f"Admin {admin.email} deleted submission {submission_id}")
    return {"success": True, "message": f"Submission {submission_id} deleted"}
