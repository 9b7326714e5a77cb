from datetime import datetime
from typing import Optional

from fastapi import File, Form, UploadFile
from pydantic import EmailStr, Field

from app.core.response.base_model import CustomBaseModel


class NGOProfileMin(CustomBaseModel):
    id: int = Field(...)
    name: str = Field(...)
    logo: dict | None = Field(None)


class NGOProfilePublic(NGOProfileMin):
    user_id: int = Field(...)
    mission: str = Field(...)
    contact_email: str = Field(...)
    contact_phone: str | None = Field(None)
    address: str | None = Field(None)
    description: str | None = Field(None)
    is_active: bool = Field(...)
    created_at: datetime = Field(...)
    updated_at: datetime = Field(...)


class NGOProfileForm:
    """Multipart body shared by profile create and edit; the logo is optional."""

    def __init__(
        self,
        name: str = Form(..., min_length=1, max_length=200),
        mission: str = Form(..., max_length=1000),
        contact_email: EmailStr = Form(...),
        contact_phone: str = Form(..., pattern=r"^\d{10}$"),
        address: str = Form(..., max_length=500),
        description: Optional[str] = Form(None, max_length=1000),
        logo: Optional[UploadFile] = File(None),
    ):
        self.name = name
        self.mission = mission
        self.contact_email = contact_email
        self.contact_phone = contact_phone
        self.address = address
        self.description = description
        self.logo = logo

    def values(self) -> dict:
        return {
            "name": self.name.strip(),
            "mission": self.mission,
            "contact_email": self.contact_email,
            "contact_phone": self.contact_phone,
            "address": self.address,
            "description": self.description,
        }
