"""Security utilities for LeadHub: password hashing, session tokens and API keys.

Session tokens are HS256 JWTs carrying the account id (``sub``), email and role
with an expiration claim. Verification checks the signature and expiry only,
so a token outlives a role change until it expires.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional

import jwt
from passlib.context import CryptContext

from leadhub.app.core.settings import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

API_KEY_PREFIX = "crm_"


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(account: Mapping[str, Any], expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    expire_delta = timedelta(
        minutes=expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    expire = datetime.now(timezone.utc) + expire_delta
    payload = {
        "sub": str(account["id"]),
        "email": account.get("email"),
        "role": account.get("role"),
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"])
    except jwt.ExpiredSignatureError as exc:
        raise ValueError("Expired token") from exc
    except jwt.InvalidTokenError as exc:
        raise ValueError("Invalid token") from exc


def generate_api_key() -> str:
    """Return a fresh ``crm_<64 hex>`` key."""
    return f"{API_KEY_PREFIX}{secrets.token_hex(32)}"
