from odonto.extensions import db
from .base import TimestampMixin

# Schedule fields editable through PATCH /api/dentistas/<id>/config
HORARIO_CAMPOS = ('intervalo_minutos', 'hora_entrada', 'hora_saida', 'almoco_inicio', 'almoco_fim')


class Profissional(db.Model, TimestampMixin):
    """Practitioner shown as a column on the account's agenda."""
    __tablename__ = 'profissionais'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)

    nome = db.Column(db.String(255), nullable=False)
    cro = db.Column(db.String(30))
    especialidade = db.Column(db.String(100), default='Clínico Geral')
    icone = db.Column(db.String(10), default='🦷')
    foto = db.Column(db.Text)
    cor = db.Column(db.String(20), default='#2d7a5f')

    # Agenda grid
    intervalo_minutos = db.Column(db.Integer, default=30)
    hora_entrada = db.Column(db.String(5), default='08:00')
    hora_saida = db.Column(db.String(5), default='18:00')
    almoco_inicio = db.Column(db.String(5), default='12:00')
    almoco_fim = db.Column(db.String(5), default='13:00')

    # Soft delete
    ativo = db.Column(db.Boolean, default=True, nullable=False)

    def config_dict(self):
        return {
            'intervalo_minutos': self.intervalo_minutos or 30,
            'hora_entrada': self.hora_entrada or '08:00',
            'hora_saida': self.hora_saida or '18:00',
            'almoco_inicio': self.almoco_inicio or '12:00',
            'almoco_fim': self.almoco_fim or '13:00',
        }

    def to_dict(self):
        data = {
            'id': self.id,
            'nome': self.nome,
            'cro': self.cro,
            'especialidade': self.especialidade,
            'icone': self.icone,
            'foto': self.foto,
            'cor': self.cor,
        }
        data.update(self.config_dict())
        return data
