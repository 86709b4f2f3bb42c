"""Plain-text rendering of import previews and results, plus error CSV export"""
import csv
import io
from typing import List

from src.zander.schemas.product_import import (
    ImportResult,
    ValidationResult,
    ValidationSummary,
)


def row_badge(result: ValidationResult) -> str:
    if result.errors:
        return "Error"
    if result.is_duplicate:
        return "Duplicate"
    if result.warnings:
        return "Warning"
    return "Valid"


def _table(headers: List[str], rows: List[List[str]]) -> str:
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    lines = [
        "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers)),
        "  ".join("-" * w for w in widths),
    ]
    for row in rows:
        lines.append("  ".join(cell.ljust(widths[i]) for i, cell in enumerate(row)))
    return "\n".join(lines)


def format_summary(summary: ValidationSummary) -> str:
    text = (
        f"{summary.total} rows: {summary.valid} valid, {summary.invalid} with errors, "
        f"{summary.duplicates} duplicates"
    )
    if summary.has_warnings:
        text += " (some rows have warnings)"
    return text


def format_preview(results: List[ValidationResult]) -> str:
    rows = []
    for r in results:
        messages = r.errors or r.warnings
        rows.append([
            str(r.row),
            r.data.get("name", ""),
            r.data.get("sku", ""),
            r.data.get("basePrice", ""),
            row_badge(r),
            "; ".join(messages),
        ])
    return _table(["Row", "Name", "SKU", "Price", "Status", "Messages"], rows)


def format_result(result: ImportResult) -> str:
    rows = [
        [str(d.row), d.name, d.status.value, d.message or ""]
        for d in result.details
    ]
    header = (
        f"Imported: {result.imported}  Updated: {result.updated}  "
        f"Skipped: {result.skipped}  Errors: {result.errors}"
    )
    return header + "\n\n" + _table(["Row", "Name", "Status", "Message"], rows)


def error_report_csv(results: List[ValidationResult]) -> str:
    """CSV of the rows that failed validation, with their messages."""
    failed = [r for r in results if r.errors]
    output = io.StringIO()
    if not failed:
        return ""
    data_fields: List[str] = []
    for r in failed:
        for key in r.data:
            if key not in data_fields:
                data_fields.append(key)
    writer = csv.DictWriter(output, fieldnames=["row", "errors"] + data_fields)
    writer.writeheader()
    for r in failed:
        writer.writerow({"row": r.row, "errors": "; ".join(r.errors), **r.data})
    return output.getvalue()
