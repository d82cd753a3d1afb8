from datetime import datetime, timezone
from sqlalchemy import Column, DateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Timestamps are set on the Python side so ordering by recency keeps
# sub-second precision on every backend.
class CreatedAtMixin:
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)


class UpdatedAtMixin:
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
