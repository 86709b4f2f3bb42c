"""Database models"""
from src.zander.models.base import Base
from src.zander.models.tenant import Tenant
from src.zander.models.user import User
from src.zander.models.product import Product
from src.zander.models.audit_log import AuditLog

__all__ = ["Base", "Tenant", "User", "Product", "AuditLog"]
