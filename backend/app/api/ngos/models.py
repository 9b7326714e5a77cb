from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import AbstractSQLModel
from app.db.mixins import SoftDeleteMixin, TimestampsMixin
from app.core.storage.fields import ImageField


class NGOProfiles(AbstractSQLModel, TimestampsMixin, SoftDeleteMixin):
    __tablename__ = "ngo_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    name = Column(String(200), nullable=False)
    mission = Column(String(1000), nullable=False, default="")
    contact_email = Column(String(256), nullable=False)
    contact_phone = Column(String(20), nullable=True)
    address = Column(String(500), nullable=True)
    description = Column(String(1000), nullable=True)
    logo = Column(
        ImageField(
            upload_to="ngos/logos/",
            variations={
                "thumbnail": {"width": 150, "height": 150},
                "medium": {"width": 500, "height": 500},
            },
        ),
        nullable=True,
    )

    user = relationship("Users", back_populates="ngo_profile")
    events = relationship("Events", back_populates="ngo")
