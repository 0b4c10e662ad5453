import pytest

from compliance_hub.services.normalization import (
    normalize_frequency,
    normalize_verification,
)


class TestFrequency:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("monthly", "monthly"),
            ("Quarterly", "quarterly"),
            ("  ANNUAL ", "annual"),
            ("first year", "first-year"),
            ("First-Year", "first-year"),
            ("yearly", "annual"),
        ],
    )
    def test_known_values(self, raw, expected):
        assert normalize_frequency(raw) == (expected, True)

    def test_unknown_value_defaults_to_annual(self):
        assert normalize_frequency("biweekly") == ("annual", False)

    def test_blank_is_default_without_warning(self):
        assert normalize_frequency("") == ("annual", True)
        assert normalize_frequency(None) == ("annual", True)


class TestVerification:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("CA", "CA"),
            ("cs", "CS"),
            ("both", "both"),
            ("Chartered Accountant", "CA"),
            ("Tax Advisor", "CA"),
            ("CPA", "CA"),
            ("Company Secretary", "CS"),
            ("Management", "CS"),
            ("Legal advisor", "CS"),
            ("CA and CS", "both"),
            ("CA/CS", "both"),
        ],
    )
    def test_known_values(self, raw, expected):
        assert normalize_verification(raw) == (expected, True)

    def test_professionals_from_both_groups(self):
        assert normalize_verification("Tax advisor and legal advisor") == ("both", True)

    def test_unknown_value_defaults_to_both(self):
        assert normalize_verification("notary") == ("both", False)

    def test_blank_is_default_without_warning(self):
        assert normalize_verification("  ") == ("both", True)

    @pytest.mark.parametrize(
        "raw", ["CA and company secretary", "CS and tax advisor", "CA, legal counsel"]
    )
    def test_abbreviation_with_title_from_other_group(self, raw):
        assert normalize_verification(raw) == ("both", True)

    def test_abbreviation_inside_a_word_is_not_a_mention(self):
        assert normalize_verification("local notary") == ("both", False)
