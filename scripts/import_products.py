#!/usr/bin/env python3
"""
Import products into Zander from a CSV file through the REST API.

Usage (from the project root):
  .venv/bin/python scripts/import_products.py template --output products.csv
  .venv/bin/python scripts/import_products.py import products.csv
  .venv/bin/python scripts/import_products.py import products.csv --update --yes

API_URL and API_TOKEN are read from the environment (or .env) unless
--api-url / --token are given. Run `python -m src.zander.seed` to print a
token for the demo tenant.
"""
import argparse
import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from src.zander.client.api_client import Credentials, ProductImportClient
from src.zander.client.report import (
    error_report_csv,
    format_preview,
    format_result,
    format_summary,
)
from src.zander.client.session import ImportSession
from src.zander.config import settings
from src.zander.logging_config import setup_logging
from src.zander.schemas.product_import import DuplicateAction
from src.zander.services.csv_normalizer import template_csv, TEMPLATE_FILENAME


def write_template(args) -> int:
    output = Path(args.output or TEMPLATE_FILENAME)
    output.write_text(template_csv(), encoding="utf-8")
    print(f"Wrote template to {output}")
    return 0


def run_import(args) -> int:
    path = Path(args.file)
    if path.suffix.lower() != ".csv":
        print("Error: file must be a .csv file", file=sys.stderr)
        return 1
    try:
        content = path.read_bytes()
    except OSError as e:
        print(f"Error: could not read {path}: {e}", file=sys.stderr)
        return 1

    credentials = Credentials(
        token=args.token or settings.API_TOKEN,
        api_url=args.api_url or settings.API_URL
    )
    if not credentials.token:
        print("Error: an API token is required (--token or API_TOKEN)", file=sys.stderr)
        return 1

    with ProductImportClient(credentials) as client:
        session = ImportSession(
            client,
            on_progress=lambda value: print(f"\rImporting... {value}%", end="", flush=True)
        )

        if not session.load_bytes(content, path.name):
            print(f"Error: {session.error}", file=sys.stderr)
            return 1

        print(format_summary(session.summary))
        print()
        print(format_preview(session.validation))
        print()

        if args.errors_out and session.summary.invalid:
            Path(args.errors_out).write_text(error_report_csv(session.validation), encoding="utf-8")
            print(f"Wrote rows with errors to {args.errors_out}")

        if not session.can_commit:
            print("Nothing to import: no valid rows.", file=sys.stderr)
            return 1

        session.set_duplicate_action(DuplicateAction.UPDATE if args.update else DuplicateAction.SKIP)

        if not args.yes:
            answer = input(
                f"Import {session.summary.valid} products "
                f"(duplicates: {session.duplicate_action.value})? [y/N] "
            )
            if answer.strip().lower() not in ("y", "yes"):
                session.reset()
                print("Import cancelled.")
                return 0

        result = session.commit()
        print()
        if result is None:
            print(f"Error: {session.error}", file=sys.stderr)
            return 1

        print(format_result(result))
        return 0 if result.errors == 0 else 2


def main():
    parser = argparse.ArgumentParser(description="Zander product CSV import")
    subparsers = parser.add_subparsers(dest="command", required=True)

    template_parser = subparsers.add_parser("template", help="Write the example CSV template")
    template_parser.add_argument("--output", default=None, help=f"Output path (default {TEMPLATE_FILENAME})")
    template_parser.set_defaults(func=write_template)

    import_parser = subparsers.add_parser("import", help="Validate and import a CSV file")
    import_parser.add_argument("file", help="CSV file to import")
    import_parser.add_argument("--update", action="store_true", help="Update existing products with a matching SKU instead of skipping them")
    import_parser.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    import_parser.add_argument("--errors-out", default=None, help="Write rows that failed validation to this CSV file")
    import_parser.add_argument("--api-url", default=None, help="API base URL (default API_URL)")
    import_parser.add_argument("--token", default=None, help="API bearer token (default API_TOKEN)")
    import_parser.set_defaults(func=run_import)

    args = parser.parse_args()
    setup_logging()
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
