"""Product CSV import endpoints: validate (preview) and commit"""
from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from src.zander.api.deps import CurrentUser, DbSession, ProductEditor
from src.zander.schemas.product_import import (
    ValidateRequest,
    ValidateResponse,
    ImportRequest,
    ImportResponse,
)
from src.zander.services.csv_normalizer import template_csv, TEMPLATE_FILENAME
from src.zander.services.product_import import (
    import_rows,
    check_row_limit,
    ImportLimitError,
    ProductImportError,
)
from src.zander.services.product_validation import validate_import

router = APIRouter(prefix="/products/import", tags=["Import"])


@router.post("/validate", response_model=ValidateResponse)
def validate_product_import(
    db: DbSession,
    current_user: CurrentUser,
    request: ValidateRequest
):
    """
    Validate rows without writing anything.
    Returns a per-row verdict (errors, warnings, duplicate flag) and a summary.
    """
    try:
        check_row_limit(request.rows)
    except ImportLimitError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ProductImportError as e:
        raise HTTPException(status_code=400, detail=str(e))

    results, summary = validate_import(db, current_user.tenant_id, request.rows)
    return ValidateResponse(data=results, summary=summary)


@router.post("", response_model=ImportResponse)
def commit_product_import(
    db: DbSession,
    current_user: ProductEditor,
    request: ImportRequest
):
    """
    Create, update or skip products according to the duplicate policy.
    Rows with validation errors are reported and never written.
    """
    try:
        result = import_rows(
            db=db,
            actor=current_user,
            rows=request.rows,
            duplicate_action=request.duplicate_action
        )
    except ImportLimitError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ProductImportError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ImportResponse(data=result)


@router.get("/template")
def download_import_template():
    return Response(
        content=template_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{TEMPLATE_FILENAME}"'}
    )
