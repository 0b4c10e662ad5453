# compliance_hub/services/country_info.py - Country designations for registration and dashboards

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from compliance_hub.schemas.country import CountryComplianceInfo
from compliance_hub.services.compliance_rules import ComplianceRuleService

logger = logging.getLogger(__name__)

# Used when the rule store has nothing for a country yet
COUNTRY_CODES = {
    "United States": "US",
    "India": "IN",
    "United Kingdom": "GB",
    "Canada": "CA",
    "Australia": "AU",
    "Germany": "DE",
    "France": "FR",
    "Singapore": "SG",
    "Japan": "JP",
    "China": "CN",
    "Brazil": "BR",
    "Mexico": "MX",
    "South Africa": "ZA",
    "Nigeria": "NG",
    "Kenya": "KE",
    "Egypt": "EG",
    "UAE": "AE",
    "Saudi Arabia": "SA",
    "Israel": "IL",
    "Austria": "AT",
    "Hong Kong": "HK",
    "Netherlands": "NL",
    "Finland": "FI",
    "Greece": "GR",
    "Vietnam": "VN",
    "Myanmar": "MM",
    "Azerbaijan": "AZ",
    "Serbia": "RS",
    "Monaco": "MC",
    "Pakistan": "PK",
    "Philippines": "PH",
    "Jordan": "JO",
    "Georgia": "GE",
    "Belarus": "BY",
    "Armenia": "AM",
    "Bhutan": "BT",
    "Sri Lanka": "LK",
    "Russia": "RU",
    "Italy": "IT",
    "Spain": "ES",
    "Portugal": "PT",
    "Belgium": "BE",
    "Switzerland": "CH",
    "Sweden": "SE",
    "Norway": "NO",
    "Denmark": "DK",
    "Ireland": "IE",
    "New Zealand": "NZ",
    "South Korea": "KR",
    "Thailand": "TH",
    "Malaysia": "MY",
    "Indonesia": "ID",
    "Bangladesh": "BD",
    "Nepal": "NP",
}

_CA = "Chartered Accountant"
_CS = "Company Secretary"
_CPA = "CPA"
_CORP_SEC = "Corporate Secretary"
_TAX = "Tax Advisor"
_MGMT = "Management"

# (CA title, CS title) by country code
PROFESSIONAL_TITLES = {
    "AT": (_TAX, _MGMT),
    "IN": (_CA, _CS),
    "US": (_CPA, _CORP_SEC),
    "GB": (_CA, _CS),
    "DE": (_TAX, _MGMT),
    "SG": (_CA, _CS),
    "HK": (_CPA, _CS),
    "NL": (_TAX, _MGMT),
    "FI": (_TAX, _MGMT),
    "GR": (_TAX, _MGMT),
    "BR": (_CPA, _CORP_SEC),
    "VN": (_CPA, _CORP_SEC),
    "MM": (_CPA, _CORP_SEC),
    "AZ": (_TAX, _MGMT),
    "RS": (_TAX, _MGMT),
    "MC": (_TAX, _MGMT),
    "PK": (_CA, _CS),
    "PH": (_CPA, _CORP_SEC),
    "NG": (_CA, _CS),
    "JO": (_TAX, _MGMT),
    "IL": (_CPA, _CORP_SEC),
    "GE": (_TAX, _MGMT),
    "BY": (_TAX, _MGMT),
    "AM": (_TAX, _MGMT),
    "BT": (_CA, _CS),
    "LK": (_CA, _CS),
    "RU": (_TAX, _MGMT),
    "CA": (_CPA, _CORP_SEC),
    "AU": (_CPA, _CS),
    "FR": ("Expert-Comptable", "Secrétaire Général"),
    "JP": (_CPA, _CORP_SEC),
    "CN": (_CPA, _CORP_SEC),
    "MX": (_CPA, _CORP_SEC),
    "ZA": (_CA, _CS),
    "KE": (_CPA, _CORP_SEC),
    "EG": (_CPA, _CORP_SEC),
    "AE": (_CPA, _CORP_SEC),
    "SA": (_CPA, _CORP_SEC),
    "IT": ("Dottore Commercialista", "Segretario Generale"),
    "ES": (_CPA, "Secretario General"),
    "PT": (_CPA, "Secretário Geral"),
    "BE": ("Expert-Comptable", "Secrétaire Général"),
    "CH": ("Expert-Comptable", "Secrétaire Général"),
    "SE": (_CPA, _CORP_SEC),
    "NO": (_CPA, _CORP_SEC),
    "DK": (_CPA, _CORP_SEC),
    "IE": (_CPA, _CORP_SEC),
    "NZ": (_CPA, _CS),
    "KR": (_CPA, _CORP_SEC),
    "TH": (_CPA, _CORP_SEC),
    "MY": (_CPA, _CS),
    "ID": (_CPA, _CORP_SEC),
    "BD": (_CA, _CS),
    "NP": (_CA, _CS),
}

DEFAULT_TITLES = ("CA", "CS")


def get_professional_titles(country_code: str) -> tuple:
    """Generic (CA title, CS title) for a country code"""
    return PROFESSIONAL_TITLES.get(country_code.upper(), DEFAULT_TITLES)


def fallback_country_info(country: str) -> Optional[CountryComplianceInfo]:
    """
    Build country info from the built-in table.

    Accepts a country name (case-insensitive) or a code from the table.
    """
    value = country.strip()
    code = None
    name = None

    for known_name, known_code in COUNTRY_CODES.items():
        if known_name.lower() == value.lower():
            code, name = known_code, known_name
            break
        if known_code == value.upper():
            code, name = known_code, known_name

    if code is None:
        return None

    ca_title, cs_title = get_professional_titles(code)
    return CountryComplianceInfo(
        country_code=code, country_name=name, ca_type=ca_title, cs_type=cs_title
    )


class UserComplianceService:
    """Country and obligation lookups used by registration and dashboards"""

    def __init__(self, db: Session):
        self.db = db
        self.rules = ComplianceRuleService(db)

    def _build_info(self, country_code: str, country_name: str) -> CountryComplianceInfo:
        return CountryComplianceInfo(
            country_code=country_code,
            country_name=country_name,
            ca_type=self.rules.get_ca_type_by_country(country_code),
            cs_type=self.rules.get_cs_type_by_country(country_code),
        )

    def get_available_countries(self) -> List[CountryComplianceInfo]:
        """Every country in the store with its CA and CS designation"""
        return [
            self._build_info(c["country_code"], c["country_name"])
            for c in self.rules.get_countries()
        ]

    def get_country_compliance_info(
        self, country_code: str
    ) -> Optional[CountryComplianceInfo]:
        for country in self.rules.get_countries():
            if country["country_code"] == country_code:
                return self._build_info(country_code, country["country_name"])
        return None

    def resolve_country(self, country: str) -> Optional[CountryComplianceInfo]:
        """
        Find designations for a country given by code or name.

        Store data with at least one designation wins; otherwise the
        built-in title table is used.
        """
        value = country.strip()
        for known in self.rules.get_countries():
            if (
                known["country_code"] == value
                or known["country_name"].lower() == value.lower()
            ):
                info = self._build_info(known["country_code"], known["country_name"])
                if info.ca_type or info.cs_type:
                    return info
                break

        info = fallback_country_info(value)
        if info is None:
            logger.info(f"No CA/CS mapping found for country: {value}")
        return info

    def get_compliance_rules_for_user(self, country_code: str, company_type: str):
        return self.rules.get_rules_by_country_and_company_type(
            country_code, company_type
        )

    def get_company_types_for_country(self, country_code: str) -> List[str]:
        return self.rules.get_company_types_by_country(country_code)

    def validate_user_compliance_profile(
        self,
        country: str,
        company_type: str,
        ca_type: Optional[str] = None,
        cs_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Check a registration profile against the rule store"""
        errors = []

        country_info = self.get_country_compliance_info(country)
        if not country_info:
            errors.append("Invalid country selected")
            return {"valid": False, "errors": errors}

        if company_type not in self.get_company_types_for_country(country):
            errors.append("Invalid company type for selected country")

        if ca_type and country_info.ca_type and ca_type != country_info.ca_type:
            errors.append(
                f'CA type must be "{country_info.ca_type}" for {country_info.country_name}'
            )

        if cs_type and country_info.cs_type and cs_type != country_info.cs_type:
            errors.append(
                f'CS type must be "{country_info.cs_type}" for {country_info.country_name}'
            )

        return {"valid": not errors, "errors": errors}

    def get_user_compliance_dashboard(
        self, country: str, company_type: str
    ) -> Dict[str, Any]:
        country_info = self.get_country_compliance_info(country)
        compliance_rules = self.get_compliance_rules_for_user(country, company_type)

        return {
            "compliance_rules": compliance_rules,
            "ca_type": country_info.ca_type if country_info else None,
            "cs_type": country_info.cs_type if country_info else None,
            "country_name": country_info.country_name if country_info else country,
        }
