import unicodedata

from odonto.extensions import db
from .base import TimestampMixin, iso


def normalizar_busca(texto):
    """Lower-case and strip accents so 'Joao' matches 'João'."""
    if not texto:
        return ''
    decomposto = unicodedata.normalize('NFD', texto.lower())
    return ''.join(c for c in decomposto if unicodedata.category(c) != 'Mn')

# Client payload key -> column name. Keys follow the front-end's camelCase.
PACIENTE_CAMPOS = {
    'nome': 'nome',
    'cpf': 'cpf',
    'rg': 'rg',
    'dataNascimento': 'data_nascimento',
    'sexo': 'sexo',
    'telefone': 'telefone',
    'celular': 'celular',
    'email': 'email',
    'endereco': 'endereco',
    'numero': 'numero',
    'complemento': 'complemento',
    'bairro': 'bairro',
    'cidade': 'cidade',
    'estado': 'estado',
    'cep': 'cep',
    'convenio': 'convenio',
    'numeroConvenio': 'numero_convenio',
    'observacoes': 'observacoes',
    # Guardian (minors)
    'menorIdade': 'menor_idade',
    'responsavelNome': 'responsavel_nome',
    'responsavelCpf': 'responsavel_cpf',
    'responsavelRg': 'responsavel_rg',
    'responsavelTelefone': 'responsavel_telefone',
    'responsavelEmail': 'responsavel_email',
    'responsavelParentesco': 'responsavel_parentesco',
    'responsavelEndereco': 'responsavel_endereco',
    # Foreign residents
    'estrangeiro': 'estrangeiro',
    'passaporte': 'passaporte',
    'pais': 'pais',
    'nacionalidade': 'nacionalidade',
    'tipo_documento': 'tipo_documento',
    # Message phone
    'tel_recados': 'tel_recados',
    'nome_recado': 'nome_recado',
}

BOOLEAN_CAMPOS = {'menor_idade', 'estrangeiro'}


class Paciente(db.Model, TimestampMixin):
    __tablename__ = 'pacientes'

    id = db.Column(db.Integer, primary_key=True)
    dentista_id = db.Column(db.Integer, db.ForeignKey('dentistas.id', ondelete='CASCADE'), nullable=False, index=True)

    # Personal
    nome = db.Column(db.String(255), nullable=False)
    nome_busca = db.Column(db.String(255), index=True)  # normalizar_busca(nome)
    cpf = db.Column(db.String(14))
    rg = db.Column(db.String(20))
    data_nascimento = db.Column(db.Date)
    sexo = db.Column(db.String(20))
    telefone = db.Column(db.String(20))
    celular = db.Column(db.String(20))
    email = db.Column(db.String(255))

    # Address
    endereco = db.Column(db.String(255))
    numero = db.Column(db.String(20))
    complemento = db.Column(db.String(100))
    bairro = db.Column(db.String(100))
    cidade = db.Column(db.String(100))
    estado = db.Column(db.String(2))
    cep = db.Column(db.String(10))

    # Insurance
    convenio = db.Column(db.String(100))
    numero_convenio = db.Column(db.String(50))
    observacoes = db.Column(db.Text)

    # Guardian, required when menor_idade is set
    menor_idade = db.Column(db.Boolean, default=False)
    responsavel_nome = db.Column(db.String(255))
    responsavel_cpf = db.Column(db.String(14))
    responsavel_rg = db.Column(db.String(20))
    responsavel_telefone = db.Column(db.String(20))
    responsavel_email = db.Column(db.String(255))
    responsavel_parentesco = db.Column(db.String(50))
    responsavel_endereco = db.Column(db.Text)

    # Foreign resident identity. Stored alongside cpf/rg, never cleared.
    estrangeiro = db.Column(db.Boolean, default=False)
    passaporte = db.Column(db.String(50))
    pais = db.Column(db.String(100))
    nacionalidade = db.Column(db.String(100))
    tipo_documento = db.Column(db.String(20), default='cpf')

    tel_recados = db.Column(db.String(20))
    nome_recado = db.Column(db.String(100))

    # Soft delete
    ativo = db.Column(db.Boolean, default=True, nullable=False, index=True)
    cadastro_completo = db.Column(db.Boolean, default=False)

    def calcular_cadastro_completo(self):
        """Name + identity document (CPF, or passport for foreigners) + CEP."""
        documento = self.passaporte if self.estrangeiro else self.cpf
        return bool(self.nome and documento and self.cep)

    def atualizar_derivados(self):
        """Refresh columns computed from other fields. Call before every commit."""
        self.nome_busca = normalizar_busca(self.nome)
        if not self.tipo_documento:
            self.tipo_documento = 'passaporte' if self.estrangeiro else 'cpf'
        self.cadastro_completo = self.calcular_cadastro_completo()

    def to_dict(self):
        return {
            'id': str(self.id),
            'nome': self.nome,
            'cpf': self.cpf,
            'rg': self.rg,
            'dataNascimento': iso(self.data_nascimento),
            'sexo': self.sexo,
            'telefone': self.telefone,
            'celular': self.celular,
            'email': self.email,
            'endereco': self.endereco,
            'numero': self.numero,
            'complemento': self.complemento,
            'bairro': self.bairro,
            'cidade': self.cidade,
            'estado': self.estado,
            'cep': self.cep,
            'convenio': self.convenio,
            'numeroConvenio': self.numero_convenio,
            'observacoes': self.observacoes,
            'menorIdade': self.menor_idade or False,
            'responsavelNome': self.responsavel_nome,
            'responsavelCpf': self.responsavel_cpf,
            'responsavelRg': self.responsavel_rg,
            'responsavelTelefone': self.responsavel_telefone,
            'responsavelEmail': self.responsavel_email,
            'responsavelParentesco': self.responsavel_parentesco,
            'responsavelEndereco': self.responsavel_endereco,
            'estrangeiro': self.estrangeiro or False,
            'passaporte': self.passaporte,
            'pais': self.pais,
            'nacionalidade': self.nacionalidade,
            'tipo_documento': self.tipo_documento or 'cpf',
            'tel_recados': self.tel_recados,
            'nome_recado': self.nome_recado,
            'cadastroCompleto': self.cadastro_completo or False,
            'ativo': self.ativo,
            'criadoEm': iso(self.criado_em),
        }

    def __repr__(self):
        return f"<Paciente {self.nome} ({self.id})>"
