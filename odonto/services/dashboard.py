"""
Dashboard aggregates for one account.

The five figures are computed concurrently, each on its own worker thread
with its own application context (and therefore its own session). They are
not read from a single snapshot: a write landing in between can show up in
some figures and not in others.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from flask import current_app
from sqlalchemy import func

from odonto.extensions import db
from odonto.models import Paciente, Agendamento, Movimentacao

logger = logging.getLogger(__name__)

PROXIMOS_LIMITE = 5


def _total_pacientes(tenant, hoje):
    return tenant.query(Paciente).filter(Paciente.ativo.is_(True)).count()


def _agendamentos_hoje(tenant, hoje):
    return tenant.query(Agendamento).filter(Agendamento.data == hoje).count()


def _agendamentos_mes(tenant, hoje):
    inicio_mes = hoje.replace(day=1)
    return tenant.query(Agendamento).filter(
        Agendamento.data >= inicio_mes,
        Agendamento.data <= hoje
    ).count()


def _receitas_mes(tenant, hoje):
    inicio_mes = hoje.replace(day=1)
    total = (
        db.session.query(func.coalesce(func.sum(Movimentacao.valor), 0))
        .filter(
            Movimentacao.dentista_id == tenant.dentista_id,
            Movimentacao.tipo == 'receita',
            Movimentacao.data >= inicio_mes,
            Movimentacao.data <= hoje
        )
        .scalar()
    )
    return float(total or 0)


def _proximos_agendamentos(tenant, hoje):
    agendamentos = (
        tenant.query(Agendamento)
        .filter(Agendamento.data >= hoje)
        .order_by(Agendamento.data.asc(), Agendamento.horario.asc())
        .limit(PROXIMOS_LIMITE)
        .all()
    )
    return [{
        'id': str(a.id),
        'pacienteNome': a.paciente_nome,
        'data': a.data.isoformat(),
        'horario': a.horario,
        'procedimento': a.procedimento,
        'status': a.status,
    } for a in agendamentos]


AGREGADOS = {
    'totalPacientes': _total_pacientes,
    'agendamentosHoje': _agendamentos_hoje,
    'agendamentosMes': _agendamentos_mes,
    'receitasMes': _receitas_mes,
    'proximosAgendamentos': _proximos_agendamentos,
}


def _run_in_context(app, fn, tenant, hoje):
    with app.app_context():
        try:
            return fn(tenant, hoje)
        finally:
            db.session.remove()


def montar_dashboard(tenant, hoje=None):
    """Compute every dashboard figure for ``tenant``. Raises on the first failing query."""
    hoje = hoje or date.today()
    app = current_app._get_current_object()
    workers = max(1, app.config.get('DASHBOARD_WORKERS', len(AGREGADOS)))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='dashboard') as executor:
        futures = {
            chave: executor.submit(_run_in_context, app, fn, tenant, hoje)
            for chave, fn in AGREGADOS.items()
        }
        return {chave: future.result() for chave, future in futures.items()}
