# compliance_hub/models/enums.py
from enum import Enum


class Frequency(str, Enum):
    FIRST_YEAR = "first-year"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUAL = "annual"


class VerificationRequired(str, Enum):
    CA = "CA"
    CS = "CS"
    BOTH = "both"


class OperationType(str, Enum):
    PARENT = "parent"
    SUBSIDIARY = "subsidiary"
    INTERNATIONAL = "international"


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRole(str, Enum):
    INVESTOR = "Investor"
    STARTUP = "Startup"
    CA = "CA"
    CS = "CS"
    ADMIN = "Admin"
    FACILITATOR = "Startup Facilitation Center"
    INVESTMENT_ADVISOR = "Investment Advisor"


# Allowed submission status changes; anything not listed is rejected
STATUS_TRANSITIONS = {
    SubmissionStatus.PENDING: {
        SubmissionStatus.UNDER_REVIEW,
        SubmissionStatus.APPROVED,
        SubmissionStatus.REJECTED,
    },
    SubmissionStatus.UNDER_REVIEW: {
        SubmissionStatus.APPROVED,
        SubmissionStatus.REJECTED,
    },
    SubmissionStatus.APPROVED: set(),
    SubmissionStatus.REJECTED: set(),
}

# Marker values carried by country setup rows in the rule table
CA_SETUP_SENTINEL = "Country Setup - CA Type"
CS_SETUP_SENTINEL = "Country Setup - CS Type"
SETUP_SENTINELS = (CA_SETUP_SENTINEL, CS_SETUP_SENTINEL)
