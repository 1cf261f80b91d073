from odonto.extensions import db
from .base import TimestampMixin, iso, money


class Agendamento(db.Model, TimestampMixin):
    __tablename__ = 'agendamentos'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)
    paciente_id = db.Column(db.Integer, db.ForeignKey('pacientes.id', ondelete='SET NULL'), nullable=True, index=True)
    profissional_id = db.Column(db.Integer, db.ForeignKey('profissionais.id', ondelete='SET NULL'), nullable=True, index=True)

    # Point-in-time snapshot of the patient, not kept in sync with pacientes
    paciente_nome = db.Column(db.String(255))
    paciente_telefone = db.Column(db.String(30))

    data = db.Column(db.Date, nullable=False, index=True)
    horario = db.Column(db.String(5), nullable=False)  # e.g. "10:45"
    duracao = db.Column(db.Integer, default=60)  # minutes
    procedimento = db.Column(db.String(255))
    valor = db.Column(db.Numeric(10, 2))

    # agendado, confirmado, cancelado, or any free-form label the agenda uses
    status = db.Column(db.String(50), default='agendado')
    encaixe = db.Column(db.Boolean, default=False)  # fit-in slot
    observacoes = db.Column(db.Text)
    rotulo = db.Column(db.String(50))

    # Public capability for the patient-facing confirmation link
    codigo_confirmacao = db.Column(db.String(10), unique=True, nullable=True, index=True)

    dentista = db.relationship('Dentista', backref=db.backref('agendamentos', lazy='dynamic'))
    profissional = db.relationship('Profissional', lazy=True)

    def to_dict(self):
        return {
            'id': str(self.id),
            'pacienteId': str(self.paciente_id) if self.paciente_id else None,
            'paciente_nome': self.paciente_nome,
            'paciente_telefone': self.paciente_telefone,
            'data': iso(self.data),
            'hora': self.horario,
            'duracao': self.duracao,
            'procedimento': self.procedimento,
            'valor': money(self.valor),
            'status': self.status,
            'encaixe': self.encaixe or False,
            'observacoes': self.observacoes,
            'codigoConfirmacao': self.codigo_confirmacao,
            'rotulo': self.rotulo,
            'profissional_id': self.profissional_id,
            'criadoEm': iso(self.criado_em),
            'atualizadoEm': iso(self.atualizado_em),
        }

    def to_public_dict(self, clinica=None):
        """Reduced view shown to whoever holds the confirmation code."""
        dentista = self.dentista
        telefone = None
        if clinica is not None and clinica.telefone:
            telefone = clinica.telefone
        elif dentista is not None:
            telefone = dentista.telefone
        return {
            'pacienteNome': self.paciente_nome,
            'data': iso(self.data),
            'horario': self.horario,
            'procedimento': self.procedimento,
            'status': self.status,
            'dentistaNome': dentista.nome if dentista else None,
            'clinicaNome': (clinica.nome_clinica if clinica and clinica.nome_clinica else None)
            or (dentista.clinica if dentista else None),
            'clinicaTelefone': telefone,
        }

    def __repr__(self):
        return f"<Agendamento {self.id} {self.data} {self.horario} [{self.status}]>"
