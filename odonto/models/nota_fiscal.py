from datetime import datetime
from odonto.extensions import db
from .base import iso, money


class NotaFiscal(db.Model):
    """Invoice stub. Numbered sequentially per account."""
    __tablename__ = 'notas_fiscais'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)
    paciente_id = db.Column(db.Integer, db.ForeignKey('pacientes.id', ondelete='SET NULL'), nullable=True)

    numero = db.Column(db.String(50))  # NF000001
    valor = db.Column(db.Numeric(10, 2), nullable=False)
    data_emissao = db.Column(db.Date, nullable=False)
    descricao_servico = db.Column(db.Text)
    status = db.Column(db.String(50), default='emitida')

    criado_em = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    paciente = db.relationship('Paciente', lazy=True)

    @staticmethod
    def formatar_numero(sequencia):
        return 'NF' + str(sequencia).zfill(6)

    def to_dict(self):
        return {
            'id': str(self.id),
            'numero': self.numero,
            'valor': money(self.valor),
            'dataEmissao': iso(self.data_emissao),
            'descricaoServico': self.descricao_servico,
            'status': self.status,
            'pacienteId': str(self.paciente_id) if self.paciente_id else None,
            'pacienteNome': self.paciente.nome if self.paciente else None,
            'criadoEm': iso(self.criado_em),
        }
