from ..extensions import db
from ..utils.dates import utcnow


class CreatedAtMixin:
    # naive UTC, assigned on insert and never changed
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)


class TimestampMixin(CreatedAtMixin):
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
