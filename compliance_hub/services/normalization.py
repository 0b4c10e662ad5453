# compliance_hub/services/normalization.py
"""
Value normalization for compliance rule fields.

Frequency and verification-required are stored as fixed enumerations, but
the values arriving from admin forms, submissions and spreadsheets are free
text. Anything that can't be mapped falls back to a default instead of being
rejected; callers learn about the fallback through the ``recognized`` flag.
"""

import re
from typing import Optional, Tuple

from compliance_hub.models.enums import Frequency, VerificationRequired

DEFAULT_FREQUENCY = Frequency.ANNUAL.value
DEFAULT_VERIFICATION = VerificationRequired.BOTH.value

FREQUENCY_ALIASES = {
    "first-year": Frequency.FIRST_YEAR.value,
    "first year": Frequency.FIRST_YEAR.value,
    "first_year": Frequency.FIRST_YEAR.value,
    "firstyear": Frequency.FIRST_YEAR.value,
    "monthly": Frequency.MONTHLY.value,
    "quarterly": Frequency.QUARTERLY.value,
    "annual": Frequency.ANNUAL.value,
    "annually": Frequency.ANNUAL.value,
    "yearly": Frequency.ANNUAL.value,
}

# Tax / accounting professionals
CA_KEYWORDS = (
    "chartered",
    "tax advisor",
    "auditor",
    "cpa",
    "certified public accountant",
    "tax consultant",
    "financial advisor",
    "accounting professional",
)

# Legal / governance professionals
CS_KEYWORDS = (
    "company secretary",
    "corporate secretary",
    "management",
    "lawyer",
    "legal advisor",
    "legal counsel",
    "corporate lawyer",
    "business lawyer",
    "corporate governance",
)

BOTH_KEYWORDS = (
    "ca and cs",
    "ca & cs",
    "ca/cs",
    "cs and ca",
)


def normalize_frequency(value: Optional[str]) -> Tuple[str, bool]:
    """
    Map a free-text frequency onto the Frequency enumeration.

    Returns (normalized value, recognized). Blank input is treated as the
    default without counting as unrecognized.
    """
    if value is None:
        return DEFAULT_FREQUENCY, True

    cleaned = str(value).strip().lower()
    if not cleaned:
        return DEFAULT_FREQUENCY, True

    normalized = FREQUENCY_ALIASES.get(cleaned)
    if normalized is None:
        return DEFAULT_FREQUENCY, False
    return normalized, True


def normalize_verification(value: Optional[str]) -> Tuple[str, bool]:
    """
    Map a free-text verification role onto CA / CS / both.

    Explicit "both" and text naming professionals from both groups win over
    the single-role matches, so "Tax advisor and legal advisor" is "both".
    """
    if value is None:
        return DEFAULT_VERIFICATION, True

    cleaned = str(value).strip().lower()
    if not cleaned:
        return DEFAULT_VERIFICATION, True

    # Bare abbreviations count only as whole words ("ca" is not in "local")
    words = set(re.findall(r"[a-z]+", cleaned))
    mentions_ca = "ca" in words or any(k in cleaned for k in CA_KEYWORDS)
    mentions_cs = "cs" in words or any(k in cleaned for k in CS_KEYWORDS)

    if cleaned == "both" or any(k in cleaned for k in BOTH_KEYWORDS):
        return VerificationRequired.BOTH.value, True
    if mentions_ca and mentions_cs:
        return VerificationRequired.BOTH.value, True
    if mentions_ca:
        return VerificationRequired.CA.value, True
    if mentions_cs:
        return VerificationRequired.CS.value, True

    return DEFAULT_VERIFICATION, False
