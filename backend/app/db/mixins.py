from datetime import datetime, timezone
from sqlalchemy import Boolean, Column
from app.core.utils.db_fields import TZAwareDateTime


class SoftDeleteMixin:
    """Rows are deactivated instead of removed so history stays intact."""

    is_active = Column(Boolean, default=True, nullable=False, index=True)
    deactivated_at = Column(TZAwareDateTime(timezone=True), nullable=True)

    def soft_delete(self):
        self.is_active = False
        self.deactivated_at = datetime.now(timezone.utc)

    @classmethod
    def active(cls):
        return cls.is_active.is_(True)


class TimestampsMixin:
    created_at = Column(
        TZAwareDateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at = Column(
        TZAwareDateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
