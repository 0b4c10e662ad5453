import io

import pandas as pd
import pytest

from compliance_hub.core.exceptions import ImportFileError
from compliance_hub.services.rule_import import (
    SAMPLE_FILENAME,
    generate_sample_csv,
    parse_rule_file,
    resolve_columns,
)

HEADER = (
    "Country Code,Country Name,CA Type,CS Type,Company Type,Compliance Name,"
    "Compliance Description,Frequency,Verification Required\n"
)


class TestResolveColumns:
    def test_truncated_export_headers(self):
        columns = resolve_columns(
            ["Country Co", "Country Name", "Company", "Complianc", "Verificatio"]
        )
        assert columns["country_code"] == ["Country Co"]
        assert columns["company_type"] == ["Company"]
        assert columns["compliance_name"] == ["Complianc"]
        assert columns["verification_required"] == ["Verificatio"]

    def test_snake_case_headers(self):
        columns = resolve_columns(["country_code", "compliance_name", "frequency"])
        assert columns["country_code"] == ["country_code"]
        assert columns["compliance_name"] == ["compliance_name"]
        assert columns["frequency"] == ["frequency"]

    def test_prefix_goes_to_first_matching_field(self):
        columns = resolve_columns(["Company Ty", "Compliance Descr"])
        assert columns["company_type"] == ["Company Ty"]
        assert columns["compliance_description"] == ["Compliance Descr"]

    def test_headers_sharing_a_normalized_name_are_all_kept(self):
        columns = resolve_columns(["Country Code", "country_code", "COUNTRY  CODE"])
        assert columns["country_code"] == ["Country Code", "country_code", "COUNTRY  CODE"]

    def test_unknown_headers_are_ignored(self):
        columns = resolve_columns(["Notes", "Country Code"])
        assert all("Notes" not in headers for headers in columns.values())


class TestParseRuleFile:
    def test_quoted_fields(self):
        content = (
            HEADER
            + 'IN,India,CA,CS,Private Limited,Board Meeting Minutes,'
            + '"Minutes, resolutions and ""MBP-1"" disclosures",monthly,CS\n'
        ).encode()

        parsed = parse_rule_file(content, "rules.csv")

        assert parsed.skipped == 0
        row_number, row = parsed.rows[0]
        assert row_number == 1
        assert row["compliance_description"] == (
            'Minutes, resolutions and "MBP-1" disclosures'
        )
        assert row["frequency"] == "monthly"
        assert row["verification_required"] == "CS"

    def test_values_trimmed_and_blank_optionals_are_none(self):
        content = (HEADER + " US , United States ,,, LLC , Annual Report ,,,\n").encode()

        _, row = parse_rule_file(content, "rules.csv").rows[0]

        assert row["country_code"] == "US"
        assert row["company_type"] == "LLC"
        assert row["ca_type"] is None
        assert row["compliance_description"] is None
        assert row["frequency"] == "annual"
        assert row["verification_required"] == "both"

    def test_row_missing_required_field_is_skipped(self):
        content = (
            HEADER
            + "IN,India,CA,CS,Private Limited,Tax Audit,,annual,CA\n"
            + "IN,,CA,CS,Private Limited,GST Return,,monthly,CA\n"
        ).encode()

        parsed = parse_rule_file(content, "rules.csv")

        assert len(parsed.rows) == 1
        assert parsed.skipped == 1
        assert parsed.warnings[0].row == 2
        assert parsed.warnings[0].field == "country_name"

    def test_unrecognized_values_produce_warnings(self):
        content = (
            HEADER + "IN,India,CA,CS,Private Limited,Tax Audit,,biweekly,notary\n"
        ).encode()

        parsed = parse_rule_file(content, "rules.csv")

        _, row = parsed.rows[0]
        assert row["frequency"] == "annual"
        assert row["verification_required"] == "both"
        assert [w.field for w in parsed.warnings] == [
            "frequency",
            "verification_required",
        ]
        assert parsed.warnings[0].value == "biweekly"

    def test_utf8_bom_is_stripped(self):
        content = ("\ufeff" + HEADER + "IN,India,,,Private Limited,Tax Audit,,,\n").encode(
            "utf-8"
        )
        _, row = parse_rule_file(content, "rules.csv").rows[0]
        assert row["country_code"] == "IN"

    def test_excel_file(self):
        df = pd.DataFrame(
            [
                {
                    "Country Code": "GB",
                    "Country Name": "United Kingdom",
                    "Company Type": "Limited Company",
                    "Compliance Name": "Annual Return",
                    "Frequency": "Annually",
                    "Verification Required": "Company Secretary",
                }
            ]
        )
        buffer = io.BytesIO()
        df.to_excel(buffer, index=False)

        parsed = parse_rule_file(buffer.getvalue(), "rules.xlsx")

        _, row = parsed.rows[0]
        assert row["country_code"] == "GB"
        assert row["frequency"] == "annual"
        assert row["verification_required"] == "CS"

    def test_excel_keeps_na_country_code(self):
        df = pd.DataFrame(
            [
                {
                    "Country Code": "NA",
                    "Country Name": "Namibia",
                    "Company Type": "Private Company",
                    "Compliance Name": "Annual Return",
                    "Compliance Description": "N/A",
                }
            ]
        )
        buffer = io.BytesIO()
        df.to_excel(buffer, index=False)

        parsed = parse_rule_file(buffer.getvalue(), "rules.xlsx")

        assert parsed.skipped == 0
        _, row = parsed.rows[0]
        assert row["country_code"] == "NA"
        assert row["compliance_description"] == "N/A"

    def test_overlong_row_reported_and_rest_imported(self):
        content = (
            "Country Code,Country Name,Company Type,Compliance Name\n"
            "IN,India,Private Limited,Tax Audit\n"
            "IN,India,Private Limited,GST Return,monthly\n"
            "US,United States,LLC,Annual Report\n"
        ).encode()

        parsed = parse_rule_file(content, "rules.csv")

        assert [position for position, _ in parsed.rows] == [1, 3]
        assert len(parsed.errors) == 1
        assert parsed.errors[0]["row"] == 2
        assert "5 fields" in parsed.errors[0]["error"]
        assert parsed.errors[0]["data"]["Compliance Name"] == "GST Return"

    def test_short_row_padded(self):
        content = (
            "Country Code,Country Name,Company Type,Compliance Name,Frequency\n"
            "IN,India,Private Limited,Tax Audit\n"
        ).encode()

        parsed = parse_rule_file(content, "rules.csv")

        assert parsed.errors == []
        assert parsed.rows[0][1]["frequency"] == "annual"

    def test_same_field_under_two_header_spellings(self):
        content = (
            "Country Code,Country Name,Company Type,Compliance Name,country_code\n"
            ",India,Private Limited,Tax Audit,IN\n"
        ).encode()

        parsed = parse_rule_file(content, "rules.csv")

        assert parsed.skipped == 0
        assert parsed.rows[0][1]["country_code"] == "IN"

    def test_unsupported_extension(self):
        with pytest.raises(ImportFileError):
            parse_rule_file(b"whatever", "rules.pdf")

    def test_empty_file(self):
        with pytest.raises(ImportFileError):
            parse_rule_file(b"", "rules.csv")

    def test_corrupt_excel(self):
        with pytest.raises(ImportFileError):
            parse_rule_file(b"not a zip archive", "rules.xlsx")


class TestSampleFile:
    def test_sample_parses_cleanly(self):
        parsed = parse_rule_file(generate_sample_csv().encode(), SAMPLE_FILENAME)

        assert len(parsed.rows) == 5
        assert parsed.skipped == 0
        assert parsed.warnings == []
        assert {row["country_code"] for _, row in parsed.rows} == {"US", "IN", "GB"}

    def test_sample_has_every_header(self):
        first_line = generate_sample_csv().splitlines()[0]
        assert first_line == HEADER.strip()
