"""Account schemas used for registration, login and credential management."""

from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field

AccountRole = Literal["admin", "support", "sales"]


def _lowercase(value: str) -> str:
    return value.lower()


# Account emails are unique regardless of case
LoginEmail = Annotated[EmailStr, AfterValidator(_lowercase)]


class AccountCreate(BaseModel):
    email: LoginEmail
    password: str = Field(min_length=6)
    role: AccountRole = "admin"


class LoginRequest(BaseModel):
    """Payload for login attempts."""

    email: LoginEmail
    password: str = Field(min_length=1)


class ChangePasswordRequest(BaseModel):
    currentPassword: str = Field(min_length=1)
    newPassword: str = Field(min_length=6)


class DefaultBusinessUpdate(BaseModel):
    business_id: Optional[int] = None


class AccountRead(BaseModel):
    id: int
    email: EmailStr
    role: AccountRole

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    token: str
    user: AccountRead


class RegisterResponse(BaseModel):
    message: str
    user: AccountRead
