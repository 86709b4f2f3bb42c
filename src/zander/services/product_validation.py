"""Server-side validation of product import rows"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple, Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.zander.models.product import Product, ProductType, ProductStatus, PricingModel
from src.zander.schemas.product_import import ValidationResult, ValidationSummary
from src.zander.services.csv_normalizer import CANONICAL_FIELDS

logger = logging.getLogger(__name__)

TYPE_VALUES = [t.value for t in ProductType]
STATUS_VALUES = [s.value for s in ProductStatus]
PRICING_MODEL_VALUES = [p.value for p in PricingModel]

DEFAULT_TYPE = ProductType.PHYSICAL.value
DEFAULT_STATUS = ProductStatus.ACTIVE.value

# Column limits of the products table
MAX_LENGTHS = {
    "name": 255,
    "sku": 100,
    "category": 100,
    "unit": 50,
}
MAX_AMOUNT = Decimal("10000000000")
CENT = Decimal("0.01")

# canonical row field -> Product attribute
FIELD_COLUMNS = {
    "name": "name",
    "description": "description",
    "sku": "sku",
    "category": "category",
    "type": "type",
    "status": "status",
    "pricingModel": "pricing_model",
    "basePrice": "base_price",
    "unit": "unit",
    "costOfGoods": "cost_of_goods",
}


def parse_decimal(value: str) -> Optional[Decimal]:
    cleaned = value.replace("$", "").replace(",", "").strip()
    try:
        number = Decimal(cleaned)
    except (InvalidOperation, AttributeError):
        return None
    if not number.is_finite():
        return None
    return number


def _check_enum(
    data: Dict[str, str],
    field: str,
    allowed: List[str],
    label: str,
    errors: List[str]
) -> None:
    raw = data.get(field, "")
    if not raw:
        return
    value = raw.upper()
    if value not in allowed:
        errors.append(f"{label} must be one of: {', '.join(allowed)} (got '{raw}')")
        return
    data[field] = value


def _check_amount(
    data: Dict[str, str],
    field: str,
    label: str,
    errors: List[str]
) -> Optional[Decimal]:
    raw = data.get(field, "")
    if not raw:
        return None
    amount = parse_decimal(raw)
    if amount is None:
        errors.append(f"{label} must be a number (got '{raw}')")
        return None
    if amount < 0:
        errors.append(f"{label} cannot be negative")
        return None
    if amount >= MAX_AMOUNT:
        errors.append(f"{label} must be less than {MAX_AMOUNT:,}")
        return None
    if amount != amount.quantize(CENT):
        errors.append(f"{label} cannot have more than 2 decimal places (got '{raw}')")
        return None
    data[field] = format(amount, "f")
    return amount


def validate_and_normalize_row(row: Dict[str, str]) -> Tuple[Dict[str, str], List[str], List[str]]:
    errors: List[str] = []
    warnings: List[str] = []
    data = {key: (value or "").strip() for key, value in row.items()}

    if not data.get("name"):
        errors.append("Product name is required")

    for field, limit in MAX_LENGTHS.items():
        if len(data.get(field, "")) > limit:
            errors.append(f"{field} is too long ({len(data[field])} characters, maximum {limit})")

    if data.get("type"):
        _check_enum(data, "type", TYPE_VALUES, "Type", errors)
    else:
        warnings.append(f"No type provided, defaulting to {DEFAULT_TYPE}")
        data["type"] = DEFAULT_TYPE

    if data.get("status"):
        _check_enum(data, "status", STATUS_VALUES, "Status", errors)
    else:
        data["status"] = DEFAULT_STATUS

    _check_enum(data, "pricingModel", PRICING_MODEL_VALUES, "Pricing model", errors)

    base_price = _check_amount(data, "basePrice", "Base price", errors)
    if not data.get("basePrice"):
        warnings.append("No base price provided, product will be priced at 0.00")
    cost = _check_amount(data, "costOfGoods", "Cost of goods", errors)
    if base_price is not None and cost is not None and cost > base_price:
        warnings.append("Cost of goods exceeds base price (negative margin)")

    if not data.get("sku"):
        warnings.append("No SKU provided, duplicates cannot be detected")

    unknown = [key for key in data if key not in CANONICAL_FIELDS]
    if unknown:
        warnings.append(f"Unrecognized columns will be ignored: {', '.join(unknown)}")

    return data, errors, warnings


def find_existing_skus(db: Session, tenant_id: int, skus: List[str]) -> Dict[str, int]:
    if not skus:
        return {}
    stmt = select(Product.sku, Product.id).where(
        Product.tenant_id == tenant_id,
        Product.sku.in_(skus)
    )
    return {sku: product_id for sku, product_id in db.execute(stmt).all()}


def validate_rows(db: Session, tenant_id: int, rows: List[Dict[str, str]]) -> List[ValidationResult]:
    skus = sorted({(row.get("sku") or "").strip() for row in rows} - {""})
    existing = find_existing_skus(db, tenant_id, skus)

    results: List[ValidationResult] = []
    first_seen: Dict[str, int] = {}

    for idx, row in enumerate(rows, start=1):
        data, errors, warnings = validate_and_normalize_row(row)

        sku = data.get("sku", "")
        existing_id = None
        if sku:
            if sku in first_seen:
                errors.append(f"SKU '{sku}' is repeated in this file (first seen in row {first_seen[sku]})")
            else:
                first_seen[sku] = idx
                existing_id = existing.get(sku)

        results.append(ValidationResult(
            row=idx,
            data=data,
            errors=errors,
            warnings=warnings,
            is_duplicate=existing_id is not None,
            existing_product_id=existing_id
        ))

    return results


def validate_import(db: Session, tenant_id: int, rows: List[Dict[str, str]]) -> Tuple[List[ValidationResult], ValidationSummary]:
    results = validate_rows(db, tenant_id, rows)
    summary = ValidationSummary.from_results(results)
    logger.info(
        "Validated %d product rows for tenant %s: %d valid, %d invalid, %d duplicates",
        summary.total, tenant_id, summary.valid, summary.invalid, summary.duplicates
    )
    return results, summary


def product_fields(data: Dict[str, str]) -> Dict[str, Any]:
    """Convert a validated row into Product column values."""
    cost = data.get("costOfGoods")
    return {
        "name": data["name"],
        "description": data.get("description") or None,
        "sku": data.get("sku") or None,
        "category": data.get("category") or None,
        "type": ProductType(data.get("type") or DEFAULT_TYPE),
        "status": ProductStatus(data.get("status") or DEFAULT_STATUS),
        "pricing_model": PricingModel(data.get("pricingModel") or PricingModel.SIMPLE.value),
        "base_price": parse_decimal(data.get("basePrice") or "0") or Decimal("0"),
        "unit": data.get("unit") or None,
        "cost_of_goods": parse_decimal(cost) if cost else None,
    }


def product_update_fields(data: Dict[str, str], supplied: Dict[str, str]) -> Dict[str, Any]:
    """Column values for updating an existing product.

    Only fields the submitted row actually carries a value for are
    returned. Creation defaults never overwrite stored values.
    """
    fields = product_fields(data)
    return {
        column: fields[column]
        for field, column in FIELD_COLUMNS.items()
        if (supplied.get(field) or "").strip()
    }
