from datetime import datetime
from odonto.extensions import db
from .base import iso, money


class Prontuario(db.Model):
    """Clinical note. Append-only: there is no update path."""
    __tablename__ = 'prontuarios'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)
    paciente_id = db.Column(db.Integer, db.ForeignKey('pacientes.id', ondelete='CASCADE'), nullable=False, index=True)

    data = db.Column(db.Date, nullable=False)
    descricao = db.Column(db.Text, nullable=False)
    procedimento = db.Column(db.String(255))
    dente = db.Column(db.String(50))  # tooth reference, e.g. "36" or "11-13"
    valor = db.Column(db.Numeric(10, 2))

    criado_em = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': str(self.id),
            'pacienteId': str(self.paciente_id),
            'data': iso(self.data),
            'descricao': self.descricao,
            'procedimento': self.procedimento,
            'dente': self.dente,
            'valor': money(self.valor),
            'criadoEm': iso(self.criado_em),
        }
