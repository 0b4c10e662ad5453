# compliance_hub/services/rule_import.py
"""
Reading compliance rule spreadsheets.

Admins export rule lists from whatever tool they keep them in, so headers
arrive renamed, truncated ("Country Co", "Verificatio") or in snake_case.
Each rule field has a prioritized list of header aliases; a header that is a
truncated prefix of a field's canonical name is accepted as a last resort.
Values are trimmed, frequency and verification are normalized, and rows
missing a required field are dropped with a warning. A CSV row with more
fields than the header is reported as a row error; the rest of the file
still imports.
"""

import csv
import io
import logging
import re
import zipfile
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from compliance_hub.core.exceptions import ImportFileError
from compliance_hub.services.normalization import (
    normalize_frequency,
    normalize_verification,
)

logger = logging.getLogger(__name__)

SAMPLE_FILENAME = "compliance_rules_sample.csv"

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx",)

# Canonical header for each field, in file column order
CANONICAL_HEADERS = {
    "country_code": "Country Code",
    "country_name": "Country Name",
    "ca_type": "CA Type",
    "cs_type": "CS Type",
    "company_type": "Company Type",
    "compliance_name": "Compliance Name",
    "compliance_description": "Compliance Description",
    "frequency": "Frequency",
    "verification_required": "Verification Required",
}

# Checked in order; the first alias with a non-empty value wins
FIELD_ALIASES = {
    "country_code": ["Country Code", "Country Co", "country_code", "country_co"],
    "country_name": ["Country Name", "country_name"],
    "ca_type": ["CA Type", "ca_type"],
    "cs_type": ["CS Type", "cs_type"],
    "company_type": ["Company Type", "Company", "company_type", "company"],
    "compliance_name": [
        "Compliance Name",
        "Complianc",
        "compliance_name",
        "compliance",
    ],
    "compliance_description": [
        "Compliance Description",
        "Compliance Desc",
        "compliance_description",
        "description",
    ],
    "frequency": ["Frequency", "frequency"],
    "verification_required": [
        "Verification Required",
        "Verificatio",
        "verification_required",
        "verification",
    ],
}

REQUIRED_FIELDS = ("country_code", "country_name", "compliance_name")
OPTIONAL_FIELDS = ("ca_type", "cs_type", "compliance_description")

# Shortest header accepted as a truncated prefix
MIN_PREFIX_LENGTH = 4

SAMPLE_RULES = [
    {
        "Country Code": "US",
        "Country Name": "United States",
        "CA Type": "CPA",
        "CS Type": "CISA",
        "Company Type": "C-Corporation",
        "Compliance Name": "Annual Financial Audit",
        "Compliance Description": "Annual audit of financial statements by certified public accountant",
        "Frequency": "annual",
        "Verification Required": "both",
    },
    {
        "Country Code": "IN",
        "Country Name": "India",
        "CA Type": "CA",
        "CS Type": "CS",
        "Company Type": "Private Limited",
        "Compliance Name": "Tax Audit",
        "Compliance Description": "Annual tax audit under Income Tax Act",
        "Frequency": "annual",
        "Verification Required": "CA",
    },
    {
        "Country Code": "GB",
        "Country Name": "United Kingdom",
        "CA Type": "ACA",
        "CS Type": "Company Secretary",
        "Company Type": "Limited Company",
        "Compliance Name": "Annual Return",
        "Compliance Description": "Annual return filing with Companies House",
        "Frequency": "annual",
        "Verification Required": "both",
    },
    {
        "Country Code": "US",
        "Country Name": "United States",
        "CA Type": "CPA",
        "CS Type": "CISA",
        "Company Type": "LLC",
        "Compliance Name": "Quarterly Tax Filing",
        "Compliance Description": "Quarterly estimated tax payments",
        "Frequency": "quarterly",
        "Verification Required": "CA",
    },
    {
        "Country Code": "IN",
        "Country Name": "India",
        "CA Type": "CA",
        "CS Type": "CS",
        "Company Type": "Public Limited",
        "Compliance Name": "Board Meeting Minutes",
        "Compliance Description": 'Monthly board meeting minutes, resolutions and "MBP-1" disclosures',
        "Frequency": "monthly",
        "Verification Required": "CS",
    },
]


@dataclass
class NormalizationWarning:
    """A value that was defaulted or a row that was dropped during import"""

    row: int
    field: str
    value: Optional[str]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ParsedRuleFile:
    """Rows ready to insert, keyed by their 1-based position in the file"""

    rows: List[Tuple[int, Dict[str, Optional[str]]]] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[NormalizationWarning] = field(default_factory=list)
    skipped: int = 0


@dataclass
class ImportResult:
    success: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)
    warnings: List[NormalizationWarning] = field(default_factory=list)
    skipped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "errors": self.errors,
            "warnings": [w.to_dict() for w in self.warnings],
            "skipped": self.skipped,
        }


def _normalize_header(header: Any) -> str:
    text = str(header).strip().lower().replace("_", " ")
    return re.sub(r"\s+", " ", text)


def resolve_columns(headers: List[str]) -> Dict[str, List[str]]:
    """
    Map each rule field to the file headers that can supply it.

    Exact alias matches (case, underscore and whitespace insensitive) come
    first in alias priority order. Headers no alias claimed are then offered
    as truncated prefixes, each to the first field whose canonical header
    starts with it.
    """
    # "Country Code" and "country_code" share a key; both stay usable
    by_normalized: Dict[str, List[str]] = {}
    for header in headers:
        by_normalized.setdefault(_normalize_header(header), []).append(header)

    columns: Dict[str, List[str]] = {name: [] for name in FIELD_ALIASES}
    claimed = set()

    for name, aliases in FIELD_ALIASES.items():
        for alias in aliases:
            for header in by_normalized.get(_normalize_header(alias), []):
                if header not in columns[name]:
                    columns[name].append(header)
                    claimed.add(header)

    for normalized, same_key in by_normalized.items():
        if len(normalized) < MIN_PREFIX_LENGTH:
            continue
        for header in same_key:
            if header in claimed:
                continue
            for name, canonical in CANONICAL_HEADERS.items():
                if _normalize_header(canonical).startswith(normalized):
                    columns[name].append(header)
                    claimed.add(header)
                    break

    unmapped = [h for h in headers if h not in claimed]
    if unmapped:
        logger.info(f"Ignoring unrecognized columns: {unmapped}")

    return columns


def _cell_to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()


def map_row(record: Dict[str, Any], columns: Dict[str, List[str]]) -> Dict[str, str]:
    """Pick each field's value from the first aliased column that has one"""
    mapped = {}
    for name, headers in columns.items():
        value = ""
        for header in headers:
            value = _cell_to_str(record.get(header))
            if value:
                break
        mapped[name] = value
    return mapped


def normalize_row(
    mapped: Dict[str, str], row_number: int, warnings: List[NormalizationWarning]
) -> Dict[str, Optional[str]]:
    """Normalize enumerated fields in place, appending a warning per default"""
    frequency, recognized = normalize_frequency(mapped.get("frequency"))
    if not recognized:
        message = f'Invalid frequency "{mapped["frequency"]}", defaulting to "{frequency}"'
        logger.warning(f"Row {row_number}: {message}")
        warnings.append(
            NormalizationWarning(row_number, "frequency", mapped["frequency"], message)
        )
    mapped["frequency"] = frequency

    raw_verification = mapped.get("verification_required")
    verification, recognized = normalize_verification(raw_verification)
    if not recognized:
        message = f'Unrecognized verification_required "{raw_verification}", defaulting to "{verification}"'
        logger.warning(f"Row {row_number}: {message}")
        warnings.append(
            NormalizationWarning(
                row_number, "verification_required", raw_verification, message
            )
        )
    mapped["verification_required"] = verification

    normalized: Dict[str, Optional[str]] = dict(mapped)
    for name in OPTIONAL_FIELDS:
        normalized[name] = mapped.get(name) or None
    return normalized


def _unique_headers(headers: List[str]) -> List[str]:
    """Suffix repeated header names the way pandas does ("Frequency.1")"""
    counts: Dict[str, int] = {}
    unique = []
    for header in headers:
        if header in counts:
            counts[header] += 1
            unique.append(f"{header}.{counts[header]}")
        else:
            counts[header] = 0
            unique.append(header)
    return unique


def _read_csv(text: str) -> Tuple[pd.DataFrame, Dict[int, List[str]]]:
    """
    Tokenize a CSV rule file one row at a time.

    A row with more fields than the header stays in the frame, truncated, so
    the rows after it keep their positions. It is also returned by position
    so the caller can report it instead of importing misaligned values.
    """
    lines = [row for row in csv.reader(io.StringIO(text)) if row]
    if not lines:
        raise ImportFileError("File is empty")

    headers = _unique_headers(lines[0])
    width = len(headers)

    records = []
    overlong: Dict[int, List[str]] = {}
    for position, row in enumerate(lines[1:], start=1):
        if len(row) > width:
            overlong[position] = row
        records.append((row + [""] * width)[:width])

    return pd.DataFrame(records, columns=headers, dtype=str), overlong


def read_rule_file(
    content: bytes, filename: str
) -> Tuple[pd.DataFrame, Dict[int, List[str]]]:
    """
    Load a CSV or Excel rule file into a DataFrame of strings.

    Also returns the CSV rows that had more fields than the header, keyed by
    their 1-based data-row position.
    """
    name = (filename or "").lower()
    overlong: Dict[int, List[str]] = {}

    try:
        if name.endswith(CSV_EXTENSIONS):
            df, overlong = _read_csv(content.decode("utf-8-sig"))
        elif name.endswith(EXCEL_EXTENSIONS):
            # "NA" is Namibia's country code, not a missing value
            df = pd.read_excel(
                io.BytesIO(content), dtype=str, keep_default_na=False, na_values=[]
            )
        else:
            raise ImportFileError(
                "Unsupported file type. Please upload a .csv or .xlsx file."
            )
    except ImportFileError:
        raise
    except UnicodeDecodeError:
        raise ImportFileError("CSV files must be UTF-8 encoded")
    except pd.errors.EmptyDataError:
        raise ImportFileError("File is empty")
    except (csv.Error, ValueError, zipfile.BadZipFile) as e:
        logger.error(f"Error reading rule file {filename}: {e}")
        raise ImportFileError(f"Could not read file: {e}")

    return df.fillna(""), overlong


def parse_rule_file(content: bytes, filename: str) -> ParsedRuleFile:
    """Read, map and normalize every data row of an uploaded rule file"""
    df, overlong = read_rule_file(content, filename)
    df.columns = [str(c) for c in df.columns]
    columns = resolve_columns(list(df.columns))

    parsed = ParsedRuleFile()

    for position, record in enumerate(df.to_dict("records"), start=1):
        if position in overlong:
            fields = overlong[position]
            message = f"Row has {len(fields)} fields but the header has {len(df.columns)}"
            logger.warning(f"Row {position} rejected. {message}")
            parsed.errors.append(
                {"row": position, "error": message, "data": dict(zip(df.columns, fields))}
            )
            continue

        mapped = map_row(record, columns)

        missing = [name for name in REQUIRED_FIELDS if not mapped.get(name)]
        if missing:
            message = f"Missing required fields: {', '.join(missing)}"
            logger.warning(f"Row {position} skipped. {message}")
            parsed.warnings.append(
                NormalizationWarning(position, ",".join(missing), None, message)
            )
            parsed.skipped += 1
            continue

        parsed.rows.append((position, normalize_row(mapped, position, parsed.warnings)))

    logger.info(
        f"Parsed {filename}: {len(parsed.rows)} rows ready, {parsed.skipped} skipped, "
        f"{len(parsed.errors)} malformed, {len(parsed.warnings)} warnings"
    )
    return parsed


def generate_sample_csv() -> str:
    """Static import template with every recognized header"""
    output = io.StringIO()
    headers = list(CANONICAL_HEADERS.values())

    writer = csv.writer(output)
    writer.writerow(headers)
    for record in SAMPLE_RULES:
        writer.writerow([record.get(header, "") for header in headers])

    csv_content = output.getvalue()
    output.close()
    return csv_content
