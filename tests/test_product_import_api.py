"""Tests for the product import REST endpoints."""
import json
from decimal import Decimal

from sqlalchemy import select

from src.zander.config import settings
from src.zander.models.audit_log import AuditLog
from src.zander.models.product import Product, ProductStatus, ProductType
from src.zander.services.auth_token import generate_api_token

VALIDATE_URL = "/products/import/validate"
IMPORT_URL = "/products/import"


def _rows():
    return [
        {"name": "AC Tune-Up", "sku": "HVAC-001", "type": "SERVICE", "basePrice": "159"},
        {"name": "Drain Cleaning", "sku": "PLB-001", "type": "SERVICE", "basePrice": "185"},
        {"name": "Widget", "sku": "W-1", "type": "PHYSICAL", "basePrice": "19.99", "unit": "each"},
        {"name": "Broken", "sku": "B-1", "type": "NOPE"},
    ]


def _products_by_sku(db, tenant):
    db.expire_all()
    products = db.execute(select(Product).where(Product.tenant_id == tenant.id)).scalars().all()
    return {p.sku: p for p in products}


def test_validate_requires_bearer_token(client):
    response = client.post(VALIDATE_URL, json={"rows": [{"name": "Widget"}]})
    assert response.status_code == 401


def test_validate_rejects_bad_token(client, admin_user):
    response = client.post(
        VALIDATE_URL,
        json={"rows": [{"name": "Widget"}]},
        headers={"Authorization": "Bearer not-a-real-token"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_validate_rejects_non_bearer_scheme(client, admin_token):
    response = client.post(
        VALIDATE_URL,
        json={"rows": [{"name": "Widget"}]},
        headers={"Authorization": f"Basic {admin_token}"},
    )
    assert response.status_code == 401


def test_inactive_user_is_rejected(client, db, admin_user, auth_headers):
    admin_user.is_active = False
    db.commit()
    response = client.post(VALIDATE_URL, json={"rows": [{"name": "Widget"}]}, headers=auth_headers)
    assert response.status_code == 401


def test_validate_returns_camel_case_results_and_summary(client, auth_headers, existing_products):
    response = client.post(VALIDATE_URL, json={"rows": _rows()}, headers=auth_headers)
    assert response.status_code == 200
    body = response.json()

    assert body["summary"] == {
        "total": 4,
        "valid": 3,
        "invalid": 1,
        "duplicates": 2,
        "hasWarnings": True,
    }
    assert body["data"][0]["warnings"] == []
    assert body["data"][3]["warnings"]
    first = body["data"][0]
    assert first["row"] == 1
    assert first["isDuplicate"] is True
    assert first["existingProductId"] == existing_products[0].id
    assert body["data"][2]["isDuplicate"] is False
    assert body["data"][2]["existingProductId"] is None
    assert body["data"][3]["errors"]


def test_validate_does_not_write(client, db, tenant, auth_headers):
    client.post(VALIDATE_URL, json={"rows": [{"name": "Widget", "sku": "W-1"}]}, headers=auth_headers)
    assert _products_by_sku(db, tenant) == {}


def test_validate_rejects_empty_rows(client, auth_headers):
    response = client.post(VALIDATE_URL, json={"rows": []}, headers=auth_headers)
    assert response.status_code == 400


def test_row_limit_returns_413(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "IMPORT_MAX_ROWS", 2)
    rows = [{"name": f"Product {i}"} for i in range(3)]
    assert client.post(VALIDATE_URL, json={"rows": rows}, headers=auth_headers).status_code == 413
    response = client.post(IMPORT_URL, json={"rows": rows, "duplicateAction": "skip"}, headers=auth_headers)
    assert response.status_code == 413


def test_import_with_skip_policy(client, db, tenant, auth_headers, existing_products):
    response = client.post(
        IMPORT_URL, json={"rows": _rows(), "duplicateAction": "skip"}, headers=auth_headers
    )
    assert response.status_code == 200
    result = response.json()["data"]

    assert (result["imported"], result["updated"], result["skipped"], result["errors"]) == (1, 0, 2, 1)
    statuses = [d["status"] for d in result["details"]]
    assert statuses == ["skipped", "skipped", "imported", "error"]
    assert result["details"][3]["name"] == "Broken"
    assert "Type must be one of" in result["details"][3]["message"]

    products = _products_by_sku(db, tenant)
    assert set(products) == {"HVAC-001", "PLB-001", "W-1"}
    assert str(products["HVAC-001"].base_price) == "149.00"
    assert products["W-1"].unit == "each"


def test_import_with_update_policy(client, db, tenant, auth_headers, existing_products):
    response = client.post(
        IMPORT_URL, json={"rows": _rows(), "duplicateAction": "update"}, headers=auth_headers
    )
    result = response.json()["data"]

    assert (result["imported"], result["updated"], result["skipped"], result["errors"]) == (1, 2, 0, 1)
    products = _products_by_sku(db, tenant)
    assert str(products["HVAC-001"].base_price) == "159.00"
    assert str(products["PLB-001"].base_price) == "185.00"
    assert products["HVAC-001"].id == existing_products[0].id
    assert "B-1" not in products


def test_update_keeps_columns_missing_from_the_file(client, db, tenant, auth_headers, existing_products):
    product = existing_products[0]
    product.status = ProductStatus.DISCONTINUED
    product.description = "Seasonal tune-up"
    product.category = "HVAC"
    product.unit = "visit"
    product.cost_of_goods = Decimal("60")
    db.commit()

    rows = [{"name": "AC Tune-Up", "sku": "HVAC-001", "basePrice": "159"}]
    response = client.post(IMPORT_URL, json={"rows": rows, "duplicateAction": "update"}, headers=auth_headers)
    assert response.json()["data"]["updated"] == 1

    updated = _products_by_sku(db, tenant)["HVAC-001"]
    assert str(updated.base_price) == "159.00"
    assert updated.type == ProductType.SERVICE
    assert updated.status == ProductStatus.DISCONTINUED
    assert updated.description == "Seasonal tune-up"
    assert updated.category == "HVAC"
    assert updated.unit == "visit"
    assert updated.cost_of_goods == Decimal("60")


def test_validate_rejects_values_the_catalog_cannot_store(client, auth_headers):
    rows = [
        {"name": "X" * 300, "sku": "S" * 150, "basePrice": "19.999"},
        {"name": "Big", "sku": "B-1", "basePrice": "1e15"},
    ]
    response = client.post(VALIDATE_URL, json={"rows": rows}, headers=auth_headers)
    body = response.json()

    assert body["summary"]["valid"] == 0
    assert body["summary"]["invalid"] == 2
    assert len(body["data"][0]["errors"]) == 3
    assert "less than" in body["data"][1]["errors"][0]


def test_import_defaults_to_skip(client, db, tenant, auth_headers, existing_products):
    response = client.post(IMPORT_URL, json={"rows": _rows()[:1]}, headers=auth_headers)
    assert response.json()["data"]["details"][0]["status"] == "skipped"


def test_import_rejects_unknown_duplicate_action(client, auth_headers):
    response = client.post(
        IMPORT_URL, json={"rows": [{"name": "Widget"}], "duplicateAction": "merge"}, headers=auth_headers
    )
    assert response.status_code == 422


def test_import_writes_audit_log(client, db, admin_user, auth_headers):
    client.post(IMPORT_URL, json={"rows": [{"name": "Widget", "sku": "W-1"}]}, headers=auth_headers)
    db.expire_all()
    entry = db.execute(select(AuditLog).where(AuditLog.action == "PRODUCTS_IMPORTED")).scalar_one()
    assert entry.actor_user_id == admin_user.id
    assert json.loads(entry.meta_json)["imported"] == 1


def test_marketing_user_cannot_import(client, marketing_user):
    headers = {"Authorization": f"Bearer {generate_api_token(marketing_user)}"}
    rows = [{"name": "Widget"}]
    assert client.post(VALIDATE_URL, json={"rows": rows}, headers=headers).status_code == 200
    assert client.post(IMPORT_URL, json={"rows": rows}, headers=headers).status_code == 403


def test_template_download(client):
    response = client.get("/products/import/template")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.startswith("name,sku,type,basePrice")
