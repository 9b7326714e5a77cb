from datetime import datetime

from pydantic import Field

from app.api.applications.schemas import ApplicantPublic, ApplicationPublic
from app.api.events.schemas import EventPublicMin
from app.api.ngos.schemas import NGOProfilePublic
from app.core.response.base_model import CustomBaseModel


class VolunteerSummary(CustomBaseModel):
    id: int = Field(...)
    full_name: str = Field(...)
    email: str = Field(...)
    phone: str | None = Field(None)
    is_active: bool = Field(...)
    created_at: datetime = Field(...)
    last_login_at: datetime | None = Field(None)
    application_count: int = Field(0)


class VolunteerDetails(VolunteerSummary):
    applications: list[ApplicationPublic] = Field([])


class NGOSummary(NGOProfilePublic):
    owner: ApplicantPublic = Field(...)
    event_count: int = Field(0)


class NGODetails(NGOSummary):
    events: list[EventPublicMin] = Field([])


class DeleteResult(CustomBaseModel):
    message: str
    deleted: dict[str, int]
