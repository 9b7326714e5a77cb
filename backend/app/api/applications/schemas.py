from datetime import datetime

from pydantic import Field

from app.api.applications.lifecycle import ApplicationStatus
from app.api.events.schemas import EventPublicMin
from app.core.response.base_model import CustomBaseModel


class ApplicationCreate(CustomBaseModel):
    message: str = Field(..., min_length=1, max_length=1000)
    skills: str | None = Field(None, max_length=500)
    availability: str | None = Field(None, max_length=500)


class ApplicationDecision(CustomBaseModel):
    response_message: str | None = Field(None, max_length=500)


class ApplicantPublic(CustomBaseModel):
    id: int
    full_name: str
    email: str
    phone: str | None = None


class ApplicationEvent(CustomBaseModel):
    id: int
    ngo_id: int
    title: str
    start_at: datetime
    end_at: datetime
    venue: str
    is_active: bool


class ApplicationPublic(CustomBaseModel):
    id: int = Field(...)
    event_id: int = Field(...)
    user_id: int = Field(...)
    message: str | None = Field(None)
    skills: str | None = Field(None)
    availability: str | None = Field(None)
    status: ApplicationStatus = Field(...)
    applied_at: datetime = Field(...)
    responded_at: datetime | None = Field(None)
    response_message: str | None = Field(None)
    responded_by_id: int | None = Field(None)
    event: ApplicationEvent = Field(...)
    user: ApplicantPublic = Field(...)
    responded_by: ApplicantPublic | None = Field(None)


class TransitionResult(CustomBaseModel):
    """Outcome of apply/approve/reject/cancel; ``changed`` is false for no-ops."""

    changed: bool
    message: str
    application: ApplicationPublic


class ApplicationStats(CustomBaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    cancelled: int = 0


class EventApplications(CustomBaseModel):
    event: EventPublicMin
    applications: list[ApplicationPublic]


class ManagedApplications(CustomBaseModel):
    stats: ApplicationStats
    applications: list[ApplicationPublic]
