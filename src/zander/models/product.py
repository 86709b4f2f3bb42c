"""Product model - catalog items sold by a tenant"""
import enum
from decimal import Decimal
from typing import Optional
from sqlalchemy import String, Text, Numeric, Enum, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.zander.models.base import Base, TimestampMixin


class ProductType(str, enum.Enum):
    PHYSICAL = "PHYSICAL"
    SERVICE = "SERVICE"
    SUBSCRIPTION = "SUBSCRIPTION"
    DIGITAL = "DIGITAL"
    ACCESS = "ACCESS"
    BUNDLE = "BUNDLE"


class ProductStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    DRAFT = "DRAFT"
    DISCONTINUED = "DISCONTINUED"


class PricingModel(str, enum.Enum):
    SIMPLE = "SIMPLE"
    TIERED = "TIERED"
    VOLUME = "VOLUME"
    CUSTOM = "CUSTOM"


class Product(Base, TimestampMixin):
    __tablename__ = "products"
    __table_args__ = (
        UniqueConstraint("tenant_id", "sku", name="uq_products_tenant_sku"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    tenant_id: Mapped[int] = mapped_column(ForeignKey("tenants.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    sku: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    type: Mapped[ProductType] = mapped_column(
        Enum(ProductType), nullable=False, default=ProductType.PHYSICAL
    )
    status: Mapped[ProductStatus] = mapped_column(
        Enum(ProductStatus), nullable=False, default=ProductStatus.ACTIVE
    )
    pricing_model: Mapped[PricingModel] = mapped_column(
        Enum(PricingModel), nullable=False, default=PricingModel.SIMPLE
    )
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    unit: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    cost_of_goods: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
