from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from app.db.base import AbstractSQLModel
from app.db.mixins import SoftDeleteMixin, TimestampsMixin
from app.core.utils.db_fields import TZAwareDateTime


class Events(AbstractSQLModel, TimestampsMixin, SoftDeleteMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ngo_id = Column(Integer, ForeignKey("ngo_profiles.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    description = Column(String(2000), nullable=False)
    category = Column(String(100), nullable=False)
    start_at = Column(TZAwareDateTime(timezone=True), nullable=False)
    end_at = Column(TZAwareDateTime(timezone=True), nullable=False)
    venue = Column(String(500), nullable=False)
    capacity = Column(Integer, nullable=False)
    is_public = Column(Boolean, nullable=False, default=True)
    contact_person = Column(String(100), nullable=True)
    contact_phone = Column(String(20), nullable=True)
    contact_email = Column(String(256), nullable=True)

    # Used by the ORM to detect concurrent edits of the same row
    version_id = Column(Integer, nullable=False, default=1)

    ngo = relationship("NGOProfiles", back_populates="events")
    applications = relationship("VolunteerApplications", back_populates="event")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="capacity_positive"),
        CheckConstraint("end_at > start_at", name="ends_after_start"),
    )
    __mapper_args__ = {"version_id_col": version_id}
