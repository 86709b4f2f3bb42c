"""API dependencies - authentication and database session"""
from typing import Annotated, Optional
from fastapi import Depends, HTTPException, Header
from sqlalchemy.orm import Session
from sqlalchemy import select

from src.zander.database import get_db
from src.zander.models.user import User, UserRole
from src.zander.services.auth_token import verify_api_token


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(
            status_code=401,
            detail="Missing Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(
            status_code=401,
            detail="Authorization header must use the Bearer scheme",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token.strip()


def get_current_user(
    db: Session = Depends(get_db),
    authorization: Optional[str] = Header(default=None)
) -> User:
    claims = verify_api_token(_bearer_token(authorization))
    if claims is None:
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id, tenant_id = claims

    user = db.execute(
        select(User).where(
            User.id == user_id,
            User.tenant_id == tenant_id,
            User.is_active == True
        )
    ).scalar_one_or_none()

    if not user:
        raise HTTPException(status_code=401, detail="User not found or inactive")

    return user


def require_product_editor(current_user: User = Depends(get_current_user)) -> User:
    """Admins, managers and sales users may change the product catalog"""
    if current_user.role not in [UserRole.ADMIN, UserRole.MANAGER, UserRole.SALES]:
        raise HTTPException(status_code=403, detail="Insufficient permissions to import products")
    return current_user


CurrentUser = Annotated[User, Depends(get_current_user)]
DbSession = Annotated[Session, Depends(get_db)]
ProductEditor = Annotated[User, Depends(require_product_editor)]
