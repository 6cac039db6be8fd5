"""Authentication dependencies resolving the caller's identity.

Two independent credential schemes are chained per route. Each scheme either
resolves an :class:`Identity`, defers (its credential is absent), or rejects by
raising :class:`AuthError`. The first identity wins; a rejection stops the
chain. When every scheme defers, the route gets ``None`` if it allows anonymous
callers and a 401 otherwise.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from fastapi import Depends, Request

from leadhub.app.core.errors import AuthError
from leadhub.app.core.security import decode_access_token
from leadhub.app.db.gateway import Gateway
from leadhub.app.db.session import get_gateway


@dataclass(frozen=True)
class Identity:
    id: int
    email: str
    role: str
    scheme: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class SessionTokenScheme:
    name = "session"

    def resolve(self, request: Request, gateway: Gateway) -> Optional[Identity]:
        authorization = request.headers.get("Authorization")
        if not authorization:
            return None
        if not authorization.startswith("Bearer "):
            raise AuthError("Not authenticated")
        token = authorization.split(" ", 1)[1]
        try:
            # Signature and expiry only; no server-side revocation
            payload = decode_access_token(token)
        except ValueError as exc:
            raise AuthError(str(exc)) from exc
        try:
            account_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise AuthError("Invalid token")
        return Identity(
            id=account_id,
            email=payload.get("email") or "",
            role=payload.get("role") or "",
            scheme=self.name,
        )


class ApiKeyScheme:
    name = "api_key"

    def resolve(self, request: Request, gateway: Gateway) -> Optional[Identity]:
        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if not api_key:
            return None
        account = gateway.exec_one(
            "SELECT id, email, role FROM accounts WHERE api_key = :api_key", {"api_key": api_key}
        )
        if account is None:
            raise AuthError("Invalid API key")
        return Identity(id=account["id"], email=account["email"], role=account["role"], scheme=self.name)


class Authenticator:
    def __init__(self, schemes: Sequence, allow_anonymous: bool = False, missing_message: str = "Authentication required"):
        self.schemes = list(schemes)
        self.allow_anonymous = allow_anonymous
        self.missing_message = missing_message

    def __call__(self, request: Request, gateway: Gateway = Depends(get_gateway)) -> Optional[Identity]:
        for scheme in self.schemes:
            identity = scheme.resolve(request, gateway)
            if identity is not None:
                return identity
        if self.allow_anonymous:
            return None
        raise AuthError(self.missing_message)


require_session = Authenticator([SessionTokenScheme()])
optional_api_key = Authenticator([ApiKeyScheme()], allow_anonymous=True)
require_api_key = Authenticator([ApiKeyScheme()], missing_message="API key required")
