from datetime import datetime, timezone

from .extensions import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StoredRecord(db.Model):
    """
    Durable slot for the draw record of this device.
    One row per storage key; the payload is the JSON document itself.
    """
    __tablename__ = "stored_records"

    id = db.Column(db.Integer, primary_key=True)
    storage_key = db.Column(db.String(128), unique=True, nullable=False)
    payload = db.Column(db.Text, nullable=False, default="{}")
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
