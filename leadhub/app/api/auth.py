"""Login, registration and credential management endpoints."""

import logging

from fastapi import APIRouter, Depends, status

from leadhub.app.core.errors import AuthError, ConflictError, NotFoundError
from leadhub.app.core.security import create_access_token, generate_api_key, get_password_hash, verify_password
from leadhub.app.db.gateway import Gateway
from leadhub.app.db.session import get_gateway
from leadhub.app.dependencies.auth import Identity, require_session
from leadhub.app.schemas.account import (
    AccountCreate,
    AccountRead,
    ChangePasswordRequest,
    DefaultBusinessUpdate,
    LoginRequest,
    LoginResponse,
    RegisterResponse,
)
from leadhub.app.services.clients import ensure_business_exists

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _get_account(gateway: Gateway, account_id: int) -> dict:
    account = gateway.exec_one("SELECT * FROM accounts WHERE id = :id", {"id": account_id})
    if account is None:
        raise NotFoundError("User not found")
    return account


@router.post("/login", response_model=LoginResponse)
async def login(credentials: LoginRequest, gateway: Gateway = Depends(get_gateway)):
    account = gateway.exec_one("SELECT * FROM accounts WHERE lower(email) = :email", {"email": credentials.email})
    if not account or not verify_password(credentials.password, account["password"]):
        raise AuthError("Invalid credentials")

    token = create_access_token(account)
    return {"token": token, "user": account}


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(account_in: AccountCreate, gateway: Gateway = Depends(get_gateway)):
    existing = gateway.exec_one("SELECT id FROM accounts WHERE lower(email) = :email", {"email": account_in.email})
    if existing:
        raise ConflictError("User already exists")
    result = gateway.exec_write(
        "INSERT INTO accounts (email, password, role) VALUES (:email, :password, :role)",
        {
            "email": account_in.email,
            "password": get_password_hash(account_in.password),
            "role": account_in.role,
        },
    )
    logger.info("Account registered: %s (%s)", account_in.email, account_in.role)
    return {
        "message": "User created successfully",
        "user": {"id": result.inserted_id, "email": account_in.email, "role": account_in.role},
    }


@router.get("/me", response_model=AccountRead)
async def read_me(identity: Identity = Depends(require_session)):
    return {"id": identity.id, "email": identity.email, "role": identity.role}


@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    account = _get_account(gateway, identity.id)
    if not verify_password(payload.currentPassword, account["password"]):
        raise AuthError("Current password is incorrect")
    gateway.exec_write(
        "UPDATE accounts SET password = :password WHERE id = :id",
        {"password": get_password_hash(payload.newPassword), "id": identity.id},
    )
    return {"message": "Password changed successfully"}


@router.get("/api-key")
async def get_api_key(gateway: Gateway = Depends(get_gateway), identity: Identity = Depends(require_session)):
    account = _get_account(gateway, identity.id)
    return {"api_key": account["api_key"]}


@router.post("/api-key/generate")
async def generate_key(gateway: Gateway = Depends(get_gateway), identity: Identity = Depends(require_session)):
    _get_account(gateway, identity.id)
    api_key = generate_api_key()
    gateway.exec_write("UPDATE accounts SET api_key = :api_key WHERE id = :id", {"api_key": api_key, "id": identity.id})
    logger.info("API key generated", extra={"account_id": identity.id})
    return {"api_key": api_key, "message": "API key generated successfully"}


@router.post("/api-key/revoke")
async def revoke_key(gateway: Gateway = Depends(get_gateway), identity: Identity = Depends(require_session)):
    gateway.exec_write("UPDATE accounts SET api_key = NULL WHERE id = :id", {"id": identity.id})
    logger.info("API key revoked", extra={"account_id": identity.id})
    return {"message": "API key revoked successfully"}


@router.put("/default-business")
async def set_default_business(
    payload: DefaultBusinessUpdate,
    gateway: Gateway = Depends(get_gateway),
    identity: Identity = Depends(require_session),
):
    """Business assigned to leads posted with this account's API key."""
    _get_account(gateway, identity.id)
    ensure_business_exists(gateway, payload.business_id)
    gateway.exec_write(
        "UPDATE accounts SET default_business_id = :business_id WHERE id = :id",
        {"business_id": payload.business_id, "id": identity.id},
    )
    return {"default_business_id": payload.business_id}
