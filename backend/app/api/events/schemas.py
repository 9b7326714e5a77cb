from datetime import datetime

from pydantic import EmailStr, Field

from app.api.ngos.schemas import NGOProfileMin
from app.core.response.base_model import CustomBaseModel


class EventBase(CustomBaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    category: str = Field(..., min_length=1, max_length=100)
    start_at: datetime = Field(...)
    end_at: datetime = Field(...)
    venue: str = Field(..., min_length=1, max_length=500)
    # Range is checked with the schedule so all field errors come back together
    capacity: int = Field(...)
    contact_person: str | None = Field(None, max_length=100)
    contact_phone: str | None = Field(None, max_length=20)
    contact_email: EmailStr | None = Field(None)


class EventCreate(EventBase):
    ngo_id: int | None = Field(
        None, description="Owning NGO profile; only used when a superuser creates"
    )


class EventUpdate(EventBase):
    is_public: bool = Field(True)


class EventDerived(CustomBaseModel):
    approved_count: int = Field(...)
    available_slots: int = Field(...)
    is_full: bool = Field(...)
    is_upcoming: bool = Field(...)
    is_ongoing: bool = Field(...)
    is_completed: bool = Field(...)


class EventPublicMin(EventDerived):
    id: int = Field(...)
    title: str = Field(...)
    category: str = Field(...)
    start_at: datetime = Field(...)
    end_at: datetime = Field(...)
    venue: str = Field(...)
    capacity: int = Field(...)
    is_public: bool = Field(...)
    is_active: bool = Field(...)
    ngo: NGOProfileMin = Field(...)
    has_applied: bool | None = Field(None)


class EventPublic(EventPublicMin):
    ngo_id: int = Field(...)
    description: str = Field(...)
    contact_person: str | None = Field(None)
    contact_phone: str | None = Field(None)
    contact_email: str | None = Field(None)
    created_at: datetime = Field(...)
    updated_at: datetime = Field(...)
