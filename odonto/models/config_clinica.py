from odonto.extensions import db
from .base import TimestampMixin

CONFIG_PADRAO = {
    'nome_clinica': '',
    'nome_dentista': '',
    'telefone': '',
    'whatsapp': '',
    'endereco': '',
    'assinatura': '',
    'hora_abre': '08:00',
    'hora_fecha': '18:00',
    'intervalo_padrao': 30,
    'dias_atendimento': 'Segunda a Sexta',
    'periodo_confirmacao': 48,
    'msg_aniversario': '',
}


class ConfigClinica(db.Model, TimestampMixin):
    """Per-account clinic settings (one row per account)."""
    __tablename__ = 'config_clinica'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, unique=True)

    nome_clinica = db.Column(db.String(255))
    nome_dentista = db.Column(db.String(255))
    telefone = db.Column(db.String(20))
    whatsapp = db.Column(db.String(20))
    endereco = db.Column(db.Text)
    assinatura = db.Column(db.Text)
    hora_abre = db.Column(db.String(5), default='08:00')
    hora_fecha = db.Column(db.String(5), default='18:00')
    intervalo_padrao = db.Column(db.Integer, default=30)
    dias_atendimento = db.Column(db.String(100), default='Segunda a Sexta')
    periodo_confirmacao = db.Column(db.Integer, default=48)  # hours before the appointment
    msg_aniversario = db.Column(db.Text)

    def to_dict(self):
        valores = {}
        for campo, padrao in CONFIG_PADRAO.items():
            valor = getattr(self, campo)
            valores[campo] = padrao if valor is None else valor
        return valores
