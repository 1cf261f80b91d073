import json
from datetime import datetime

from odonto.extensions import db


class AuditLog(db.Model):
    """Append-only trail of writes to tenant data. Rows are never updated."""
    __tablename__ = 'audit_logs'
    __table_args__ = (
        db.Index('ix_audit_logs_entity', 'entity_type', 'entity_id'),
    )

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=True, index=True)

    entity_type = db.Column(db.String(64), nullable=False)  # paciente, agendamento, financeiro...
    entity_id = db.Column(db.String(64), nullable=True)
    action = db.Column(db.String(32), nullable=False, index=True)  # create, update, delete, confirm, cancel, resolve
    details = db.Column(db.Text, nullable=True)  # JSON object
    ip_address = db.Column(db.String(45), nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def details_dict(self):
        return json.loads(self.details) if self.details else {}

    def __repr__(self):
        return f"<AuditLog {self.action} {self.entity_type}:{self.entity_id}>"
