"""Seed data for the Summit Home Services demo tenant"""
from decimal import Decimal

from sqlalchemy.orm import Session
from sqlalchemy import select

from src.zander.database import SessionLocal, engine
from src.zander.models import Base
from src.zander.models.tenant import Tenant
from src.zander.models.user import User, UserRole
from src.zander.models.product import Product, ProductType, ProductStatus, PricingModel
from src.zander.services.auth_token import generate_api_token

DEMO_SUBDOMAIN = "summit"

DEMO_USERS = [
    ("mike@summithomeservices.com", "Mike", "Sullivan", UserRole.ADMIN),
    ("jessica@summithomeservices.com", "Jessica", "Reyes", UserRole.MANAGER),
    ("tyler@summithomeservices.com", "Tyler", "Brooks", UserRole.SALES),
    ("amanda@summithomeservices.com", "Amanda", "Foster", UserRole.MARKETING),
]

# (sku, name, category, base price, description)
DEMO_PRODUCTS = [
    ("HVAC-001", "AC Tune-Up", "HVAC", "149", "Comprehensive AC inspection and maintenance service"),
    ("HVAC-002", "Furnace Tune-Up", "HVAC", "129", "Complete furnace inspection and maintenance service"),
    ("HVAC-003", "AC Repair", "HVAC", "350", "Standard AC repair service (parts additional)"),
    ("HVAC-004", "Ductwork Repair", "HVAC", "800", "Ductwork inspection, sealing, and repair service"),
    ("HVAC-005", "Smart Thermostat Install", "HVAC", "350", "Smart thermostat installation and setup"),
    ("PLB-001", "Drain Cleaning", "Plumbing", "175", "Professional drain cleaning service"),
    ("PLB-002", "Water Heater Flush", "Plumbing", "150", "Water heater maintenance and flush service"),
    ("PLB-003", "Leak Repair", "Plumbing", "350", "Standard plumbing leak repair service"),
    ("ELC-001", "Panel Inspection", "Electrical", "125", "Electrical panel safety inspection"),
    ("ELC-002", "Panel Upgrade", "Electrical", "3500", "Electrical panel upgrade to 200 amp service"),
]


def create_demo_tenant(db: Session) -> Tenant:
    existing = db.execute(
        select(Tenant).where(Tenant.subdomain == DEMO_SUBDOMAIN)
    ).scalar_one_or_none()

    if existing:
        print("Demo tenant already exists")
        return existing

    tenant = Tenant(company_name="Summit Home Services", subdomain=DEMO_SUBDOMAIN)
    db.add(tenant)
    db.commit()
    db.refresh(tenant)
    print(f"Created tenant: {tenant.company_name} (ID: {tenant.id})")
    return tenant


def create_demo_users(db: Session, tenant: Tenant) -> list[User]:
    created = []
    for email, first_name, last_name, role in DEMO_USERS:
        existing = db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

        if existing:
            print(f"{role.value} user already exists: {email}")
            created.append(existing)
            continue

        user = User(
            tenant_id=tenant.id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            role=role,
            is_active=True
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        print(f"Created {role.value} user: {email} (ID: {user.id})")
        created.append(user)

    return created


def create_demo_products(db: Session, tenant: Tenant) -> int:
    created = 0
    for sku, name, category, price, description in DEMO_PRODUCTS:
        existing = db.execute(
            select(Product).where(Product.tenant_id == tenant.id, Product.sku == sku)
        ).scalar_one_or_none()
        if existing:
            continue
        db.add(Product(
            tenant_id=tenant.id,
            sku=sku,
            name=name,
            category=category,
            description=description,
            type=ProductType.SERVICE,
            status=ProductStatus.ACTIVE,
            pricing_model=PricingModel.SIMPLE,
            base_price=Decimal(price),
            unit="service"
        ))
        created += 1
    db.commit()
    print(f"Created {created} products ({len(DEMO_PRODUCTS) - created} already existed)")
    return created


def run_seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        tenant = create_demo_tenant(db)
        users = create_demo_users(db, tenant)
        create_demo_products(db, tenant)
        admin = users[0]
        print(f"API token for {admin.email}:")
        print(generate_api_token(admin))
        print("Seed completed successfully")
    finally:
        db.close()


if __name__ == "__main__":
    run_seed()
