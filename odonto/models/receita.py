from datetime import datetime
from odonto.extensions import db
from .base import iso


class Receita(db.Model):
    """Prescription. ``medicamentos`` is the list of items as the editor sends them."""
    __tablename__ = 'receitas'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)
    paciente_id = db.Column(db.Integer, db.ForeignKey('pacientes.id', ondelete='CASCADE'), nullable=False, index=True)

    tipo = db.Column(db.String(50), default='simples')
    medicamentos = db.Column(db.JSON, nullable=False)
    observacoes = db.Column(db.Text)

    criado_em = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': str(self.id),
            'tipo': self.tipo,
            'medicamentos': self.medicamentos or [],
            'observacoes': self.observacoes,
            'criadoEm': iso(self.criado_em),
        }
