import uuid
from datetime import datetime

from ..errors import NotFound
from ..extensions import db


def new_id() -> str:
    return str(uuid.uuid4())


def iso(value):
    return value.isoformat() if value else None


class OwnedMixin:
    """Rows that belong to exactly one User through `user_id`."""

    # Used in "<label> not found" messages
    label = "Record"

    @classmethod
    def for_user(cls, user_id):
        return cls.query.filter_by(user_id=user_id)

    @classmethod
    def get_for_user(cls, record_id, user_id):
        row = cls.for_user(user_id).filter_by(id=record_id).first()
        if row is None:
            raise NotFound(f"{cls.label} not found")
        return row

    def apply(self, values: dict) -> None:
        for key, value in values.items():
            setattr(self, key, value)


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
