from datetime import datetime
from odonto.extensions import db
from .base import iso


class FilaEncaixe(db.Model):
    """Patient waiting for a fit-in slot."""
    __tablename__ = 'fila_encaixe'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)

    nome = db.Column(db.String(255), nullable=False)
    telefone = db.Column(db.String(30), nullable=False)
    motivo = db.Column(db.Text)
    urgente = db.Column(db.Boolean, default=False)
    resolvido = db.Column(db.Boolean, default=False, index=True)

    criado_em = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    resolvido_em = db.Column(db.DateTime, nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'nome': self.nome,
            'telefone': self.telefone,
            'motivo': self.motivo,
            'urgente': self.urgente or False,
            'resolvido': self.resolvido or False,
            'created_at': iso(self.criado_em),
            'resolvido_em': iso(self.resolvido_em),
        }
