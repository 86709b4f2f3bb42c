"""API bearer tokens signed with itsdangerous"""
from typing import Optional, Tuple
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from src.zander.config import settings
from src.zander.models.user import User

TOKEN_SALT = "zander-api-token"


def _serializer() -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.AUTH_TOKEN_SECRET, salt=TOKEN_SALT)


def generate_api_token(user: User) -> str:
    return _serializer().dumps({"user_id": user.id, "tenant_id": user.tenant_id})


def verify_api_token(token: str, max_age: Optional[int] = None) -> Optional[Tuple[int, int]]:
    """Return (user_id, tenant_id) for a valid token, None otherwise."""
    if max_age is None:
        max_age = settings.AUTH_TOKEN_MAX_AGE
    try:
        data = _serializer().loads(token, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(data, dict):
        return None
    user_id = data.get("user_id")
    tenant_id = data.get("tenant_id")
    if not isinstance(user_id, int) or not isinstance(tenant_id, int):
        return None
    return user_id, tenant_id
