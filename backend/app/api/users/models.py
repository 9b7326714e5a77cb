import enum
from sqlalchemy import Column, Enum, Integer, String
from sqlalchemy.orm import relationship

from app.db.base import AbstractSQLModel
from app.db.mixins import SoftDeleteMixin, TimestampsMixin
from app.core.utils.db_fields import TZAwareDateTime


class UserRoles(enum.Enum):
    volunteer = "volunteer"
    ngo = "ngo"
    superuser = "superuser"


# Roles a visitor may pick at sign-up; superusers only come from seeding.
SELF_REGISTER_ROLES = (UserRoles.volunteer, UserRoles.ngo)


class Users(AbstractSQLModel, TimestampsMixin, SoftDeleteMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), nullable=False, unique=True, index=True)
    full_name = Column(String(200), nullable=False)
    phone = Column(String(20), nullable=True)
    password = Column(String(100), nullable=False)
    role = Column(Enum(UserRoles), nullable=False, default=UserRoles.volunteer)
    last_login_at = Column(TZAwareDateTime(timezone=True), nullable=True)

    ngo_profile = relationship("NGOProfiles", back_populates="user", uselist=False)

    def __repr__(self):
        return f"<Users {self.id} {self.email} ({self.role.value})>"
