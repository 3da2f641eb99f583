"""Client schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ClientBase(BaseModel):
    name: str = Field(min_length=1)
    contact_person: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    address: str = Field(min_length=1)
    vat_number: Optional[str] = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = Field(default=None, min_length=1)
    vat_number: Optional[str] = None


class ClientRead(ClientBase):
    model_config = ConfigDict(from_attributes=True)

    id: str
    # Stored addresses are not re-validated on read.
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
