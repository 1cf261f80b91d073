from odonto.extensions import db, bcrypt
from .base import TimestampMixin, iso


class Dentista(db.Model, TimestampMixin):
    """Registered practice account. Every other table is owned by one of these."""
    __tablename__ = 'dentistas'

    id = db.Column(db.Integer, primary_key=True)
    nome = db.Column(db.String(255), nullable=False)
    cro = db.Column(db.String(50), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)  # always lower-case
    senha_hash = db.Column(db.String(255), nullable=False)

    # Profile
    clinica = db.Column(db.String(255))
    especialidade = db.Column(db.String(255))
    telefone = db.Column(db.String(20))

    # Status (never hard-deleted)
    ativo = db.Column(db.Boolean, default=True, nullable=False)
    plano = db.Column(db.String(50), default='premium')

    # Last login tracking
    ultimo_login = db.Column(db.DateTime, nullable=True)
    total_logins = db.Column(db.Integer, default=0)

    def set_senha(self, senha):
        """Hash and set password"""
        self.senha_hash = bcrypt.generate_password_hash(senha).decode('utf-8')

    def check_senha(self, senha):
        """Check if provided password matches hash"""
        return bcrypt.check_password_hash(self.senha_hash, senha)

    def to_dict(self):
        return {
            'id': str(self.id),
            'nome': self.nome,
            'cro': self.cro,
            'email': self.email,
            'clinica': self.clinica,
            'especialidade': self.especialidade,
            'telefone': self.telefone,
            'plano': self.plano or 'premium',
            'ultimoLogin': iso(self.ultimo_login),
        }

    def __repr__(self):
        return f"<Dentista {self.email} ({self.id})>"
