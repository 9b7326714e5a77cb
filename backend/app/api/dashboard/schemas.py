from app.api.applications.schemas import ApplicationPublic, ApplicationStats
from app.api.events.schemas import EventPublic, EventPublicMin
from app.core.response.base_model import CustomBaseModel


class SystemStats(CustomBaseModel):
    total_users: int
    total_ngos: int
    total_events: int
    total_applications: int
    pending_applications: int
    active_events: int


class SuperuserDashboard(CustomBaseModel):
    stats: SystemStats
    recent_events: list[EventPublicMin]
    recent_applications: list[ApplicationPublic]


class VolunteerStats(CustomBaseModel):
    total_applications: int
    pending_applications: int
    approved_applications: int


class VolunteerDashboard(CustomBaseModel):
    stats: VolunteerStats
    my_applications: list[ApplicationPublic]
    upcoming_events: list[ApplicationPublic]


class EventDashboard(CustomBaseModel):
    event: EventPublic
    stats: ApplicationStats
    applications: list[ApplicationPublic]
