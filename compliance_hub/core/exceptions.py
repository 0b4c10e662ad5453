# compliance_hub/core/exceptions.py
"""
Service-layer exceptions.

Services raise these; the app maps them to HTTP responses in main.py.
"""


class ComplianceHubError(Exception):
    """Base class for all service errors"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ComplianceHubError):
    """Requested record does not exist"""


class ValidationError(ComplianceHubError):
    """Input failed a business rule before anything was written"""


class InvalidStatusTransition(ComplianceHubError):
    """Submission status change not allowed from its current status"""

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot change submission status from '{current}' to '{requested}'"
        )
        self.current = current
        self.requested = requested


class PromotionError(ComplianceHubError):
    """Approve-and-promote failed; nothing was written"""


class ImportFileError(ComplianceHubError):
    """Uploaded rule file could not be read at all"""
