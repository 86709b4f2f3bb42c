"""Tests for preview/result rendering and the error CSV export."""
import csv
import io

from src.zander.client.report import (
    error_report_csv,
    format_preview,
    format_result,
    format_summary,
    row_badge,
)
from src.zander.schemas.product_import import (
    ImportResult,
    ImportRowStatus,
    ValidationResult,
    ValidationSummary,
)


def _results():
    return [
        ValidationResult(row=1, data={"name": "Widget", "sku": "W-1"}),
        ValidationResult(row=2, data={"name": "Gadget"}, warnings=["No SKU provided"]),
        ValidationResult(row=3, data={"name": "Bad", "sku": "B-1"}, errors=["Type must be one of: X", "oops"]),
        ValidationResult(row=4, data={"name": "Dup", "sku": "D-1"}, is_duplicate=True, existing_product_id=9),
    ]


def test_row_badges():
    assert [row_badge(r) for r in _results()] == ["Valid", "Warning", "Error", "Duplicate"]


def test_preview_lists_every_row_with_messages():
    text = format_preview(_results())
    lines = text.splitlines()
    assert len(lines) == 2 + 4
    assert "Type must be one of: X; oops" in lines[4]


def test_summary_mentions_warnings():
    summary = ValidationSummary.from_results(_results())
    assert format_summary(summary) == (
        "4 rows: 3 valid, 1 with errors, 1 duplicates (some rows have warnings)"
    )


def test_result_table_counts():
    result = ImportResult()
    result.record(1, "Widget", ImportRowStatus.IMPORTED)
    result.record(2, "Dup", ImportRowStatus.SKIPPED, "SKU 'D-1' already exists")
    text = format_result(result)
    assert text.startswith("Imported: 1  Updated: 0  Skipped: 1  Errors: 0")
    assert "already exists" in text


def test_error_report_contains_only_failed_rows():
    report = error_report_csv(_results())
    rows = list(csv.DictReader(io.StringIO(report)))
    assert len(rows) == 1
    assert rows[0]["row"] == "3"
    assert rows[0]["errors"] == "Type must be one of: X; oops"
    assert rows[0]["sku"] == "B-1"


def test_error_report_empty_when_no_errors():
    assert error_report_csv(_results()[:2]) == ""
