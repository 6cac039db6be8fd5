"""Business schemas."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, HttpUrl, field_validator


class BusinessBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    tax_id: Optional[str] = None
    website: Optional[HttpUrl] = None


class BusinessCreate(BusinessBase):
    name: str = Field(min_length=1)


class BusinessUpdate(BusinessBase):
    name: Optional[str] = Field(default=None, min_length=1)

    @field_validator("name")
    @classmethod
    def reject_null_name(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value


class BusinessRead(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    tax_id: Optional[str] = None
    website: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
