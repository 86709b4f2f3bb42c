"""Shared fixtures: in-memory database, API client and demo tenant."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTH_TOKEN_SECRET", "test-secret")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.zander.database import get_db
from src.zander.main import app
from src.zander.models import Base
from src.zander.models.product import Product, ProductType, ProductStatus
from src.zander.models.tenant import Tenant
from src.zander.models.user import User, UserRole
from src.zander.services.auth_token import generate_api_token


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def tenant(db):
    tenant = Tenant(company_name="Summit Home Services", subdomain="summit")
    db.add(tenant)
    db.commit()
    return tenant


@pytest.fixture
def other_tenant(db):
    tenant = Tenant(company_name="Other Co", subdomain="other")
    db.add(tenant)
    db.commit()
    return tenant


def _make_user(db, tenant, email, role):
    user = User(
        tenant_id=tenant.id,
        email=email,
        first_name="Test",
        last_name=role.value.title(),
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def admin_user(db, tenant):
    return _make_user(db, tenant, "mike@summithomeservices.com", UserRole.ADMIN)


@pytest.fixture
def marketing_user(db, tenant):
    return _make_user(db, tenant, "amanda@summithomeservices.com", UserRole.MARKETING)


@pytest.fixture
def existing_products(db, tenant, other_tenant):
    products = [
        Product(tenant_id=tenant.id, sku="HVAC-001", name="AC Tune-Up",
                type=ProductType.SERVICE, status=ProductStatus.ACTIVE, base_price=Decimal("149")),
        Product(tenant_id=tenant.id, sku="PLB-001", name="Drain Cleaning",
                type=ProductType.SERVICE, status=ProductStatus.ACTIVE, base_price=Decimal("175")),
        # Same SKU in another tenant must never count as a duplicate
        Product(tenant_id=other_tenant.id, sku="ELC-001", name="Panel Inspection",
                type=ProductType.SERVICE, status=ProductStatus.ACTIVE, base_price=Decimal("125")),
    ]
    db.add_all(products)
    db.commit()
    return products


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_token(admin_user):
    return generate_api_token(admin_user)


@pytest.fixture
def auth_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}
