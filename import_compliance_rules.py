#!/usr/bin/env python3
"""
Standalone script to import compliance rules from CSV or Excel files
Same parsing and normalization as the admin bulk-upload endpoint
"""

import sys
import os
import argparse
import logging
from datetime import datetime

from compliance_hub.core.config import settings
from compliance_hub.core.database import get_db, init_db
from compliance_hub.core.exceptions import ImportFileError
from compliance_hub.services.compliance_rules import ComplianceRuleService
from compliance_hub.services.rule_import import CSV_EXTENSIONS, EXCEL_EXTENSIONS


def import_rule_file(file_path: str, dry_run: bool = False) -> dict:
    """Import compliance rules from a CSV or Excel file"""

    if not os.path.exists(file_path):
        raise FileNotFoundError(f"File not found: {file_path}")

    if not file_path.lower().endswith(CSV_EXTENSIONS + EXCEL_EXTENSIONS):
        raise ValueError("File must be CSV or Excel format (.csv or .xlsx)")

    with open(file_path, "rb") as f:
        content = f.read()

    init_db()
    db = next(get_db())

    try:
        print(f"{'DRY RUN: ' if dry_run else ''}Importing compliance rules from: {file_path}")
        print(f"Database: {settings.database_url}")
        print(f"Started at: {datetime.now()}")
        print("-" * 50)

        service = ComplianceRuleService(db)

        if dry_run:
            print("DRY RUN MODE - No changes will be saved to database")
            result = service.preview_import(content, os.path.basename(file_path))
        else:
            result = service.bulk_upload_rules(content, os.path.basename(file_path))

        results = result.to_dict()

        print("\nImport Results:")
        label = "Valid" if dry_run else "Inserted"
        print(f"   {label}: {results['success']} rules")
        print(f"   Errors:  {len(results['errors'])}")
        print(f"   Skipped: {results['skipped']} (missing required fields)")
        print(f"   Warnings: {len(results['warnings'])}")

        for error in results["errors"]:
            print(f"   Row {error['row']}: {error['error']}")
        for warning in results["warnings"]:
            print(f"   Row {warning['row']}: {warning['message']}")

        return results

    except Exception as e:
        print(f"Import failed: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


def get_database_stats() -> dict:
    """Get current rule store statistics"""
    init_db()
    db = next(get_db())

    try:
        stats = ComplianceRuleService(db).get_store_stats()

        print("Current Rule Store Stats:")
        print(f"   Total rows: {stats['total_rules']}")
        print(f"   Obligations: {stats['obligations']}")
        print(f"   Country setup rows: {stats['setup_rows']}")
        print(f"   Countries: {stats['countries']}")
        print(f"   Company types: {stats['company_types']}")

        return stats

    finally:
        db.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Import compliance rules from CSV or Excel files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python import_compliance_rules.py import rules.csv
  python import_compliance_rules.py import --dry-run rules.xlsx
  python import_compliance_rules.py stats
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    import_parser = subparsers.add_parser(
        "import", help="Import compliance rules from a file"
    )
    import_parser.add_argument("file", help="Path to CSV or Excel file")
    import_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be imported without making changes",
    )

    subparsers.add_parser("stats", help="Show current rule store statistics")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    logging.basicConfig(level=settings.log_level)

    try:
        if args.command == "import":
            import_rule_file(args.file, dry_run=args.dry_run)

            if not args.dry_run:
                print("\nImport completed successfully!")

        elif args.command == "stats":
            get_database_stats()

    except (FileNotFoundError, ValueError, ImportFileError) as e:
        print(f"\nError: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
