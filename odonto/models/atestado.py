from datetime import datetime
from odonto.extensions import db
from .base import iso


class Atestado(db.Model):
    """Medical certificate or attendance declaration."""
    __tablename__ = 'atestados'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)
    paciente_id = db.Column(db.Integer, db.ForeignKey('pacientes.id', ondelete='CASCADE'), nullable=False, index=True)

    tipo = db.Column(db.String(50), default='atestado')
    dias = db.Column(db.Integer, default=1)
    cid = db.Column(db.String(20))
    horario = db.Column(db.String(50))  # free text, e.g. "das 08:00 às 10:00"
    conteudo = db.Column(db.Text)

    criado_em = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': str(self.id),
            'tipo': self.tipo,
            'dias': self.dias,
            'cid': self.cid,
            'horario': self.horario,
            'conteudo': self.conteudo,
            'criadoEm': iso(self.criado_em),
        }
