from .user import User
from .country import Country
from .compliance_rule import ComplianceRule
from .submission import UserSubmittedCompliance


__all__ = [
    "User",
    "Country",
    "ComplianceRule",
    "UserSubmittedCompliance",
]
