"""
Derived event state: approved head-count, fullness and where the event sits
in time. Nothing here is persisted; callers recompute it on every read.
"""

from datetime import datetime, timezone
from sqlalchemy import func, select

from app.api.applications.lifecycle import ApplicationStatus
from app.api.applications.models import VolunteerApplications
from app.api.events.models import Events


def approved_count_subquery():
    """Correlated count of approved applications, evaluated per ``Events`` row."""
    return (
        select(func.count(VolunteerApplications.id))
        .where(
            VolunteerApplications.event_id == Events.id,
            VolunteerApplications.status == ApplicationStatus.approved,
        )
        .correlate(Events)
        .scalar_subquery()
    )


def approved_count_query(event_id: int):
    return select(func.count(VolunteerApplications.id)).where(
        VolunteerApplications.event_id == event_id,
        VolunteerApplications.status == ApplicationStatus.approved,
    )


def is_full(capacity: int, approved: int) -> bool:
    return approved >= capacity


def is_upcoming(start_at: datetime, now: datetime) -> bool:
    return now < start_at


def is_ongoing(start_at: datetime, end_at: datetime, now: datetime) -> bool:
    return start_at <= now <= end_at


def is_completed(end_at: datetime, now: datetime) -> bool:
    return now > end_at


def describe(event: Events, approved: int, now: datetime | None = None) -> dict:
    now = now or datetime.now(timezone.utc)
    return {
        "approved_count": approved,
        "available_slots": max(event.capacity - approved, 0),
        "is_full": is_full(event.capacity, approved),
        "is_upcoming": is_upcoming(event.start_at, now),
        "is_ongoing": is_ongoing(event.start_at, event.end_at, now),
        "is_completed": is_completed(event.end_at, now),
    }


def validate_event_window(
    start_at: datetime | None,
    end_at: datetime | None,
    capacity: int | None,
    now: datetime | None = None,
) -> dict[str, str]:
    """Field-scoped problems with an event's schedule and capacity."""
    now = now or datetime.now(timezone.utc)
    errors = {}
    if start_at is None:
        errors["start_at"] = "Start date is required."
    elif start_at <= now:
        errors["start_at"] = "Start date must be in the future."
    if end_at is None:
        errors["end_at"] = "End date is required."
    elif start_at is not None and end_at <= start_at:
        errors["end_at"] = "End date must be after start date."
    if capacity is None or capacity <= 0:
        errors["capacity"] = "Capacity must be greater than 0."
    return errors
