from .auth import auth_bp
from .pacientes import pacientes_bp
from .agendamentos import agendamentos_bp
from .prontuarios import prontuarios_bp
from .anamnese import anamnese_bp
from .receitas import receitas_bp
from .atestados import atestados_bp
from .financeiro import financeiro_bp
from .notas import notas_bp
from .dentistas import dentistas_bp
from .fila_encaixe import fila_encaixe_bp
from .config_clinica import config_clinica_bp
from .dashboard import dashboard_bp
from .health import health_bp

__all__ = [
    'auth_bp', 'pacientes_bp', 'agendamentos_bp', 'prontuarios_bp', 'anamnese_bp', 'receitas_bp', 'atestados_bp',
    'financeiro_bp', 'notas_bp', 'dentistas_bp', 'fila_encaixe_bp', 'config_clinica_bp', 'dashboard_bp', 'health_bp'
]
