from datetime import datetime
from odonto.extensions import db
from .base import iso, money

TIPOS_MOVIMENTACAO = ('receita', 'despesa')


class Movimentacao(db.Model):
    """Financial ledger entry (revenue or expense)."""
    __tablename__ = 'financeiro'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)
    paciente_id = db.Column(db.Integer, db.ForeignKey('pacientes.id', ondelete='SET NULL'), nullable=True)

    tipo = db.Column(db.String(20), nullable=False, index=True)  # receita / despesa
    descricao = db.Column(db.String(255), nullable=False)
    valor = db.Column(db.Numeric(10, 2), nullable=False)
    data = db.Column(db.Date, nullable=False, index=True)
    status = db.Column(db.String(50), default='pendente')
    forma_pagamento = db.Column(db.String(50))
    parcelas = db.Column(db.Integer, default=1)
    observacoes = db.Column(db.Text)

    criado_em = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    paciente = db.relationship('Paciente', lazy=True)

    def to_dict(self):
        return {
            'id': str(self.id),
            'tipo': self.tipo,
            'descricao': self.descricao,
            'valor': money(self.valor),
            'data': iso(self.data),
            'status': self.status,
            'formaPagamento': self.forma_pagamento,
            'parcelas': self.parcelas,
            'pacienteId': str(self.paciente_id) if self.paciente_id else None,
            'pacienteNome': self.paciente.nome if self.paciente else None,
            'observacoes': self.observacoes,
            'criadoEm': iso(self.criado_em),
        }
