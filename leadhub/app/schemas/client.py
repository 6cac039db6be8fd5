"""Client schemas for lead intake, updates and responses."""

from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, EmailStr, Field, field_validator

ClientStatus = Literal["new", "contacted", "active", "inactive"]

SIGNUP_TRACKING_FIELDS = (
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_term",
    "utm_content",
    "referrer",
    "signup_page",
)


def _blank_to_none(value):
    # Website forms post empty strings for untouched inputs
    if isinstance(value, str) and not value.strip():
        return None
    return value


OptionalId = Annotated[Optional[int], BeforeValidator(_blank_to_none)]
OptionalEmail = Annotated[Optional[EmailStr], BeforeValidator(_blank_to_none)]


class ClientCreate(BaseModel):
    """Lead intake from the app or from an external website form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: str = Field(min_length=1)
    email: OptionalEmail = None
    phone: Optional[str] = None
    source: str = "website"
    status: ClientStatus = "new"
    tags: List[str] = Field(default_factory=list)
    business_id: OptionalId = None
    utm_source: Optional[str] = None
    utm_medium: Optional[str] = None
    utm_campaign: Optional[str] = None
    utm_term: Optional[str] = None
    utm_content: Optional[str] = None
    referrer: Optional[str] = None
    signup_page: Optional[str] = None

    def tracking(self) -> dict:
        return {field: getattr(self, field) for field in SIGNUP_TRACKING_FIELDS}


class ClientUpdate(BaseModel):
    """Partial update: only fields present in the payload are written."""

    model_config = ConfigDict(str_strip_whitespace=True)

    full_name: Optional[str] = Field(default=None, min_length=1)
    email: OptionalEmail = None
    phone: Optional[str] = None
    status: Optional[ClientStatus] = None
    source: Optional[str] = None
    tags: Optional[List[str]] = None
    business_id: OptionalId = None

    @field_validator("full_name", "status", "source", "tags")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class ClientRead(BaseModel):
    id: int
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str
    source: str
    tags: List[str] = Field(default_factory=list)
    business_id: Optional[int] = None
    business_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ClientCreateResponse(BaseModel):
    success: bool = True
    client: ClientRead
    message: str = "Lead created successfully"


class ClientListResponse(BaseModel):
    clients: List[ClientRead]
    total: int
    limit: int
    offset: int
