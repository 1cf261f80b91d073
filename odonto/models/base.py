from datetime import datetime
from odonto.extensions import db


class TimestampMixin:
    criado_em = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    atualizado_em = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


def iso(value):
    """ISO-8601 string for a date/datetime, or None."""
    return value.isoformat() if value else None


def money(value):
    """Numeric column value as float (JSON friendly), or None."""
    return float(value) if value is not None else None
