import pytest

from compliance_hub.schemas.compliance_rule import ComplianceRuleCreate
from compliance_hub.services.country_info import (
    DEFAULT_TITLES,
    UserComplianceService,
    fallback_country_info,
    get_professional_titles,
)


@pytest.fixture
def service(db_session):
    return UserComplianceService(db_session)


class TestBuiltInTitles:
    def test_known_country(self):
        assert get_professional_titles("in") == ("Chartered Accountant", "Company Secretary")
        assert get_professional_titles("AT") == ("Tax Advisor", "Management")

    def test_unknown_country(self):
        assert get_professional_titles("ZZ") == DEFAULT_TITLES

    def test_fallback_by_name_or_code(self):
        by_name = fallback_country_info("united states")
        by_code = fallback_country_info("US")

        assert by_name == by_code
        assert by_name.country_name == "United States"
        assert by_name.ca_type == "CPA"
        assert by_name.cs_type == "Corporate Secretary"

    def test_fallback_unknown(self):
        assert fallback_country_info("Atlantis") is None


class TestUserComplianceService:
    def test_available_countries_carry_designations(self, service, seeded_rules):
        countries = {c.country_code: c for c in service.get_available_countries()}

        assert set(countries) == {"IN", "GB", "US"}
        assert countries["GB"].ca_type == "ACA"
        assert countries["US"].cs_type == "Corporate Secretary"

    def test_resolve_prefers_store(self, service, rule_service):
        rule_service.add_country_with_types("IN", "India", ["ICAI Member"], ["ICSI Member"])

        info = service.resolve_country("India")

        assert info.country_code == "IN"
        assert info.ca_type == "ICAI Member"

    def test_resolve_falls_back_to_built_in_table(self, service, rule_service):
        rule_service.add_rule(
            ComplianceRuleCreate(
                country_code="JP",
                country_name="Japan",
                company_type="Kabushiki Kaisha",
                compliance_name="Corporate Tax Return",
            )
        )

        info = service.resolve_country("JP")

        assert info.country_name == "Japan"
        assert info.ca_type == "CPA"

    def test_resolve_unknown(self, service):
        assert service.resolve_country("Atlantis") is None

    def test_validate_profile(self, service, seeded_rules):
        result = service.validate_user_compliance_profile(
            "IN", "Private Limited", ca_type="CA", cs_type="CS"
        )
        assert result == {"valid": True, "errors": []}

    def test_validate_profile_wrong_designation(self, service, seeded_rules):
        result = service.validate_user_compliance_profile(
            "IN", "LLC", ca_type="Chartered Accountant"
        )

        assert result["valid"] is False
        assert result["errors"] == [
            "Invalid company type for selected country",
            'CA type must be "CA" for India',
        ]

    def test_validate_profile_unknown_country(self, service, seeded_rules):
        assert service.validate_user_compliance_profile("XX", "LLC") == {
            "valid": False,
            "errors": ["Invalid country selected"],
        }

    def test_dashboard(self, service, seeded_rules):
        dashboard = service.get_user_compliance_dashboard("IN", "Private Limited")

        assert dashboard["country_name"] == "India"
        assert dashboard["ca_type"] == "CA"
        assert {r.compliance_name for r in dashboard["compliance_rules"]} == {
            "Tax Audit",
            "Annual Return",
        }
