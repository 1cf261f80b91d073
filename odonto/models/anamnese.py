from odonto.extensions import db
from .base import TimestampMixin, iso, money

CONDICOES = (
    'diabetes', 'hipertensao', 'cardiopatia', 'hepatite', 'hiv', 'gestante', 'lactante', 'epilepsia',
    'problema_renal', 'problema_respiratorio', 'problema_sangramento', 'problema_cicatrizacao',
    'cancer', 'radioterapia', 'quimioterapia',
)
ALERGIAS = ('alergia_anestesico', 'alergia_antibiotico', 'alergia_latex', 'alergia_outros')
HABITOS = ('fumante', 'etilista', 'usa_drogas', 'usa_medicamentos')

BOOLEAN_CAMPOS = CONDICOES + ALERGIAS + HABITOS + ('cirurgia_previa',)
TEXTO_CAMPOS = ('pressao_arterial', 'alergias_descricao', 'medicamentos_descricao', 'cirurgias_descricao', 'observacoes')

# Alert levels, most severe first
CRITICO = 'critico'
IMPORTANTE = 'importante'
ALERGIA = 'alergia'

ALERTAS_ALERGIA = (
    ('alergia_anestesico', 'Alergia Anestésico'),
    ('alergia_antibiotico', 'Alergia Antibiótico'),
    ('alergia_latex', 'Alergia Látex'),
)
ALERTAS_CRITICOS = (
    ('hiv', 'HIV/AIDS'),
    ('gestante', 'Gestante'),
    ('epilepsia', 'Epilepsia'),
    ('problema_sangramento', 'Prob. Sangramento'),
    ('cancer', 'Câncer'),
    ('radioterapia', 'Radioterapia'),
    ('quimioterapia', 'Quimioterapia'),
)
ALERTAS_IMPORTANTES = (
    ('diabetes', 'Diabetes'),
    ('hipertensao', 'Hipertensão'),
    ('cardiopatia', 'Cardiopatia'),
    ('hepatite', 'Hepatite'),
)


class Anamnese(db.Model, TimestampMixin):
    """Medical history questionnaire. One per patient per account."""
    __tablename__ = 'anamneses'
    __table_args__ = (
        db.UniqueConstraint('dentista_id', 'paciente_id', name='uq_anamnese_dentista_paciente'),
    )

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)
    paciente_id = db.Column(db.Integer, db.ForeignKey('pacientes.id', ondelete='CASCADE'), nullable=False, index=True)

    # Vital signs
    peso = db.Column(db.Numeric(5, 1))
    altura = db.Column(db.Numeric(3, 2))
    pressao_arterial = db.Column(db.String(20))
    frequencia_cardiaca = db.Column(db.Integer)

    # Conditions
    diabetes = db.Column(db.Boolean, default=False)
    hipertensao = db.Column(db.Boolean, default=False)
    cardiopatia = db.Column(db.Boolean, default=False)
    hepatite = db.Column(db.Boolean, default=False)
    hiv = db.Column(db.Boolean, default=False)
    gestante = db.Column(db.Boolean, default=False)
    lactante = db.Column(db.Boolean, default=False)
    epilepsia = db.Column(db.Boolean, default=False)
    problema_renal = db.Column(db.Boolean, default=False)
    problema_respiratorio = db.Column(db.Boolean, default=False)
    problema_sangramento = db.Column(db.Boolean, default=False)
    problema_cicatrizacao = db.Column(db.Boolean, default=False)
    cancer = db.Column(db.Boolean, default=False)
    radioterapia = db.Column(db.Boolean, default=False)
    quimioterapia = db.Column(db.Boolean, default=False)

    # Allergies
    alergia_anestesico = db.Column(db.Boolean, default=False)
    alergia_antibiotico = db.Column(db.Boolean, default=False)
    alergia_latex = db.Column(db.Boolean, default=False)
    alergia_outros = db.Column(db.Boolean, default=False)
    alergias_descricao = db.Column(db.Text)

    # Habits and medication
    fumante = db.Column(db.Boolean, default=False)
    etilista = db.Column(db.Boolean, default=False)
    usa_drogas = db.Column(db.Boolean, default=False)
    usa_medicamentos = db.Column(db.Boolean, default=False)
    medicamentos_descricao = db.Column(db.Text)

    cirurgia_previa = db.Column(db.Boolean, default=False)
    cirurgias_descricao = db.Column(db.Text)
    observacoes = db.Column(db.Text)

    def alertas(self):
        """Flags the chair-side view shows before treatment, in display order."""
        alertas = [{'nome': nome, 'tipo': CRITICO} for campo, nome in ALERTAS_ALERGIA if getattr(self, campo)]
        if self.alergia_outros and self.alergias_descricao:
            alertas.append({'nome': self.alergias_descricao, 'tipo': ALERGIA})
        alertas += [{'nome': nome, 'tipo': CRITICO} for campo, nome in ALERTAS_CRITICOS if getattr(self, campo)]
        alertas += [{'nome': nome, 'tipo': IMPORTANTE} for campo, nome in ALERTAS_IMPORTANTES if getattr(self, campo)]
        if self.usa_medicamentos and self.medicamentos_descricao:
            alertas.append({'nome': f'Med: {self.medicamentos_descricao}', 'tipo': ALERGIA})
        return alertas

    def to_dict(self):
        result = {
            'id': str(self.id),
            'paciente_id': str(self.paciente_id),
            'peso': money(self.peso),
            'altura': money(self.altura),
            'pressao_arterial': self.pressao_arterial,
            'frequencia_cardiaca': self.frequencia_cardiaca,
        }
        for campo in BOOLEAN_CAMPOS:
            result[campo] = bool(getattr(self, campo))
        for campo in TEXTO_CAMPOS:
            result[campo] = getattr(self, campo)
        result['criado_em'] = iso(self.criado_em)
        result['atualizado_em'] = iso(self.atualizado_em)
        return result
