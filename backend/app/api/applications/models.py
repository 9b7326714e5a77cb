from datetime import datetime, timezone
from sqlalchemy import (
    Column,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import AbstractSQLModel
from app.db.mixins import TimestampsMixin
from app.core.utils.db_fields import TZAwareDateTime
from app.api.applications.lifecycle import ApplicationStatus


class VolunteerApplications(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "volunteer_applications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    message = Column(String(1000), nullable=True)
    skills = Column(String(500), nullable=True)
    availability = Column(String(500), nullable=True)

    status = Column(
        Enum(ApplicationStatus),
        nullable=False,
        default=ApplicationStatus.pending,
        index=True,
    )
    applied_at = Column(
        TZAwareDateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    responded_at = Column(TZAwareDateTime(timezone=True), nullable=True)
    response_message = Column(String(500), nullable=True)
    responded_by_id = Column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True
    )

    event = relationship("Events", back_populates="applications")
    user = relationship("Users", foreign_keys=[user_id])
    responded_by = relationship("Users", foreign_keys=[responded_by_id])

    __table_args__ = (UniqueConstraint("event_id", "user_id"),)
