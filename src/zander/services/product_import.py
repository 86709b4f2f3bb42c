"""Product import service: commits validated rows with a duplicate policy"""
import logging
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.zander.config import get_settings
from src.zander.models.product import Product
from src.zander.models.user import User
from src.zander.schemas.product_import import DuplicateAction, ImportResult, ImportRowStatus
from src.zander.services.audit import log_action
from src.zander.services.product_validation import validate_rows, product_fields, product_update_fields

logger = logging.getLogger(__name__)


class ProductImportError(Exception):
    """Raised when an import request cannot be processed at all."""
    pass


class ImportLimitError(ProductImportError):
    pass


def check_row_limit(rows: List[Dict[str, str]]) -> None:
    if not rows:
        raise ProductImportError("No rows to import")
    max_rows = get_settings().IMPORT_MAX_ROWS
    if len(rows) > max_rows:
        raise ImportLimitError(f"Too many rows: {len(rows)} (maximum {max_rows} per import)")


def import_rows(
    db: Session,
    actor: User,
    rows: List[Dict[str, str]],
    duplicate_action: DuplicateAction = DuplicateAction.SKIP
) -> ImportResult:
    check_row_limit(rows)
    results = validate_rows(db, actor.tenant_id, rows)
    report = ImportResult()

    for validation in results:
        data = validation.data
        name = data.get("name", "")

        if validation.errors:
            report.record(validation.row, name, ImportRowStatus.ERROR, "; ".join(validation.errors))
            continue

        if validation.is_duplicate and duplicate_action == DuplicateAction.SKIP:
            report.record(
                validation.row, name, ImportRowStatus.SKIPPED,
                f"SKU '{data.get('sku')}' already exists"
            )
            continue

        try:
            with db.begin_nested():
                if validation.is_duplicate:
                    product = db.execute(
                        select(Product).where(
                            Product.id == validation.existing_product_id,
                            Product.tenant_id == actor.tenant_id
                        )
                    ).scalar_one()
                    supplied = rows[validation.row - 1]
                    for attr, value in product_update_fields(data, supplied).items():
                        setattr(product, attr, value)
                    status = ImportRowStatus.UPDATED
                else:
                    db.add(Product(tenant_id=actor.tenant_id, **product_fields(data)))
                    status = ImportRowStatus.IMPORTED
                db.flush()
        except SQLAlchemyError as e:
            logger.warning("Product import row %d failed: %s", validation.row, e)
            report.record(validation.row, name, ImportRowStatus.ERROR, f"Database error: {e.__class__.__name__}")
            continue

        report.record(validation.row, name, status)

    db.commit()

    logger.info(
        "Imported products for tenant %s: %d imported, %d updated, %d skipped, %d errors",
        actor.tenant_id, report.imported, report.updated, report.skipped, report.errors
    )

    log_action(
        db=db,
        actor=actor,
        action="PRODUCTS_IMPORTED",
        target_type="product",
        meta={
            "imported": report.imported,
            "updated": report.updated,
            "skipped": report.skipped,
            "errors": report.errors,
            "duplicate_action": duplicate_action.value
        }
    )

    return report
