from flask import Blueprint, request, jsonify
from odonto.models import Agendamento, Paciente, Profissional, ConfigClinica
from odonto.extensions import db
from odonto.utils import (
    tenant_required, log_audit, json_body, campo_nao_texto, validar_id, parse_date, parse_horario, parse_valor,
    parse_bool, empty_to_none
)
from odonto.services import gerar_codigo_unico, normalizar_codigo
from sqlalchemy import or_
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

agendamentos_bp = Blueprint('agendamentos', __name__, url_prefix='/api/agendamentos')

STATUS_PADRAO = 'agendado'
STATUS_CONFIRMADO = 'confirmado'
STATUS_CANCELADO = 'cancelado'
ACOES_PUBLICAS = {'confirmar': STATUS_CONFIRMADO, 'cancelar': STATUS_CANCELADO}
ACOES_AUDIT = {'confirmar': 'confirm', 'cancelar': 'cancel'}
TAMANHO_MINIMO_CODIGO = 6
TEXTO_CAMPOS = ('pacienteNome', 'pacienteTelefone', 'procedimento', 'observacoes', 'rotulo', 'status')


def _paciente_snapshot(paciente):
    """Name/phone copied onto the appointment at write time."""
    return paciente.nome, (paciente.celular or paciente.telefone)


def _find_by_codigo(codigo):
    return Agendamento.query.filter_by(codigo_confirmacao=normalizar_codigo(codigo)).first()


def _public_view(agendamento):
    clinica = ConfigClinica.query.filter_by(dentista_id=agendamento.dentista_id).first()
    return agendamento.to_public_dict(clinica)


# ---------------------------------------------------------------------------
# Public routes (possession of the code is the credential)
# ---------------------------------------------------------------------------

@agendamentos_bp.route('/buscar-codigo/<codigo>', methods=['GET'])
def buscar_por_codigo(codigo):
    """Reduced appointment view for the patient-facing confirmation page"""
    if not codigo or len(codigo.strip()) < TAMANHO_MINIMO_CODIGO:
        return jsonify({
            'success': False,
            'erro': 'Código inválido'
        }), 400

    try:
        agendamento = _find_by_codigo(codigo)
        if not agendamento:
            return jsonify({
                'success': False,
                'erro': 'Agendamento não encontrado'
            }), 404
        view = _public_view(agendamento)
    except Exception as e:
        logger.error("Code lookup failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao buscar agendamento'
        }), 500

    return jsonify({
        'success': True,
        'agendamento': view
    }), 200


@agendamentos_bp.route('/confirmar', methods=['POST'])
def confirmar_por_codigo():
    """
    Confirm or cancel through the public link.
    Body: { "codigo": "ABC234", "acao": "confirmar" | "cancelar" }
    """
    data = json_body() or {}
    codigo = data.get('codigo')
    acao = data.get('acao')

    if not isinstance(codigo, str) or len(codigo.strip()) < TAMANHO_MINIMO_CODIGO:
        return jsonify({
            'success': False,
            'erro': 'Código inválido'
        }), 400

    if acao not in ACOES_PUBLICAS:
        return jsonify({
            'success': False,
            'erro': 'Ação inválida'
        }), 400

    try:
        agendamento = _find_by_codigo(codigo)
        if not agendamento:
            return jsonify({
                'success': False,
                'erro': 'Agendamento não encontrado'
            }), 404

        # Re-confirming is a no-op
        if acao == 'confirmar' and agendamento.status == STATUS_CONFIRMADO:
            return jsonify({
                'success': True,
                'message': 'Consulta já estava confirmada',
                'agendamento': _public_view(agendamento)
            }), 200

        novo_status = ACOES_PUBLICAS[acao]
        agendamento.status = novo_status
        agendamento.atualizado_em = datetime.utcnow()
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Public confirmation failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao processar confirmação'
        }), 500

    logger.info("Appointment %s %s via patient link", agendamento.id, novo_status)
    log_audit('agendamento', ACOES_AUDIT[acao], dentista_id=agendamento.dentista_id, entity_id=agendamento.id, details={'origem': 'link'})

    return jsonify({
        'success': True,
        'message': 'Consulta confirmada!' if acao == 'confirmar' else 'Consulta cancelada',
        'agendamento': _public_view(agendamento)
    }), 200


# ---------------------------------------------------------------------------
# Authenticated routes
# ---------------------------------------------------------------------------

@agendamentos_bp.route('', methods=['GET'])
@tenant_required
def list_agendamentos(tenant):
    """
    List appointments ordered by date and time.
    Query params:
        data: YYYY-MM-DD (single day)
        inicio, fim: YYYY-MM-DD (inclusive window, used when data is absent)
        profissional_id: agenda column
    """
    filtro_data = request.args.get('data', type=str)
    inicio = request.args.get('inicio', type=str)
    fim = request.args.get('fim', type=str)
    profissional_id = request.args.get('profissional_id', type=int)

    query = tenant.query(Agendamento)

    if profissional_id:
        query = query.filter(Agendamento.profissional_id == profissional_id)

    if filtro_data:
        dia = parse_date(filtro_data)
        if not dia:
            return jsonify({
                'success': False,
                'erro': 'Data inválida. Use AAAA-MM-DD'
            }), 400
        query = query.filter(Agendamento.data == dia)
    elif inicio and fim:
        data_inicio, data_fim = parse_date(inicio), parse_date(fim)
        if not data_inicio or not data_fim:
            return jsonify({
                'success': False,
                'erro': 'Período inválido. Use AAAA-MM-DD'
            }), 400
        query = query.filter(Agendamento.data >= data_inicio, Agendamento.data <= data_fim)

    try:
        agendamentos = query.order_by(Agendamento.data.asc(), Agendamento.horario.asc()).all()
    except Exception as e:
        logger.error("List appointments failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao listar agendamentos'
        }), 500

    return jsonify({
        'success': True,
        'agendamentos': [a.to_dict() for a in agendamentos],
        'total': len(agendamentos)
    }), 200


@agendamentos_bp.route('/pendentes', methods=['GET'])
@tenant_required
def list_pendentes(tenant):
    """
    Appointments still waiting for confirmation in a window, for batch reminders.
    Query params: inicio, fim (required)
    """
    data_inicio = parse_date(request.args.get('inicio', type=str))
    data_fim = parse_date(request.args.get('fim', type=str))
    if not data_inicio or not data_fim:
        return jsonify({
            'success': False,
            'erro': 'Período obrigatório (inicio e fim)'
        }), 400

    try:
        agendamentos = (
            tenant.query(Agendamento)
            .filter(
                Agendamento.data >= data_inicio,
                Agendamento.data <= data_fim,
                or_(Agendamento.status == STATUS_PADRAO, Agendamento.status.is_(None))
            )
            .order_by(Agendamento.data.asc(), Agendamento.horario.asc())
            .all()
        )
    except Exception as e:
        logger.error("Pending appointments lookup failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao buscar agendamentos pendentes'
        }), 500

    result = []
    for a in agendamentos:
        item = a.to_dict()
        item['profissional_nome'] = a.profissional.nome if a.profissional else 'Profissional'
        result.append(item)

    return jsonify({
        'success': True,
        'agendamentos': result,
        'total': len(result)
    }), 200


@agendamentos_bp.route('/recados', methods=['GET'])
@tenant_required
def list_recados(tenant):
    """
    Appointments in a window whose patient left a message phone.
    Query params: inicio, fim (required)
    """
    data_inicio = parse_date(request.args.get('inicio', type=str))
    data_fim = parse_date(request.args.get('fim', type=str))
    if not data_inicio or not data_fim:
        return jsonify({
            'success': False,
            'erro': 'Período obrigatório'
        }), 400

    try:
        linhas = (
            tenant.query(Agendamento)
            .join(Paciente, Paciente.id == Agendamento.paciente_id)
            .filter(
                Paciente.dentista_id == tenant.dentista_id,
                Agendamento.data >= data_inicio,
                Agendamento.data <= data_fim,
                Paciente.tel_recados.isnot(None),
                Paciente.tel_recados != ''
            )
            .add_columns(Paciente.tel_recados, Paciente.nome_recado)
            .order_by(Agendamento.data.asc(), Agendamento.horario.asc())
            .all()
        )
    except Exception as e:
        logger.error("Message-phone lookup failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao buscar recados'
        }), 500

    recados = [{
        'id': str(a.id),
        'paciente_nome': a.paciente_nome,
        'tel_recados': tel_recados,
        'nome_recado': nome_recado,
        'data': a.data.isoformat(),
        'hora': a.horario,
        'procedimento': a.procedimento,
        'profissional_nome': a.profissional.nome if a.profissional else 'Profissional',
    } for a, tel_recados, nome_recado in linhas]

    return jsonify({
        'success': True,
        'agendamentos': recados,
        'total': len(recados)
    }), 200


def _resolve_references(tenant, data, agendamento):
    """
    Apply patient/professional references from the payload, resolved inside the
    tenant. Returns (error message, status) or None.
    """
    if 'pacienteId' in data:
        paciente_id = empty_to_none(data.get('pacienteId'))
        if paciente_id is None:
            agendamento.paciente_id = None
        else:
            paciente = tenant.get(Paciente, validar_id(paciente_id))
            if not paciente:
                return 'Paciente não encontrado', 404
            agendamento.paciente_id = paciente.id
            nome, telefone = _paciente_snapshot(paciente)
            if not empty_to_none(data.get('pacienteNome')):
                agendamento.paciente_nome = nome
            if not empty_to_none(data.get('pacienteTelefone')):
                agendamento.paciente_telefone = telefone

    if 'pacienteNome' in data and empty_to_none(data.get('pacienteNome')):
        agendamento.paciente_nome = data['pacienteNome'].strip()
    if 'pacienteTelefone' in data and empty_to_none(data.get('pacienteTelefone')):
        agendamento.paciente_telefone = data['pacienteTelefone'].strip()

    profissional_key = 'profissional_id' if 'profissional_id' in data else None
    if profissional_key:
        profissional_id = empty_to_none(data.get(profissional_key))
        if profissional_id is None:
            agendamento.profissional_id = None
        else:
            profissional = tenant.get(Profissional, validar_id(profissional_id))
            if not profissional or not profissional.ativo:
                return 'Profissional não encontrado', 404
            agendamento.profissional_id = profissional.id

    return None


def _apply_scalars(data, agendamento):
    """Copy scalar fields present in the payload. Returns an error message or None."""
    campo = campo_nao_texto(data, TEXTO_CAMPOS)
    if campo:
        return f'Campo "{campo}" deve ser texto'

    if 'data' in data:
        dia = parse_date(data.get('data'))
        if not dia:
            return 'Data inválida. Use AAAA-MM-DD'
        agendamento.data = dia

    if 'horario' in data:
        horario = parse_horario(data.get('horario'))
        if not horario:
            return 'Horário inválido. Use HH:MM (ex: 10:30)'
        agendamento.horario = horario

    if 'duracao' in data and data.get('duracao') not in (None, ''):
        try:
            duracao = int(data['duracao'])
        except (TypeError, ValueError):
            return 'Duração inválida'
        if duracao <= 0:
            return 'Duração inválida'
        agendamento.duracao = duracao

    if 'valor' in data:
        if data.get('valor') in (None, ''):
            agendamento.valor = None
        else:
            valor = parse_valor(data['valor'])
            if valor is None:
                return 'Valor inválido'
            agendamento.valor = valor

    for campo in ('procedimento', 'observacoes', 'rotulo'):
        if campo in data:
            setattr(agendamento, campo, empty_to_none(data.get(campo)))

    if 'status' in data and empty_to_none(data.get('status')):
        agendamento.status = data['status'].strip()

    if 'encaixe' in data:
        agendamento.encaixe = parse_bool(data.get('encaixe'))

    return None


@agendamentos_bp.route('', methods=['POST'])
@tenant_required
def create_agendamento(tenant):
    """Create appointment; a confirmation code is allocated before insert"""
    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    if not data.get('data') or not data.get('horario'):
        return jsonify({
            'success': False,
            'erro': 'Data e horário obrigatórios'
        }), 400

    agendamento = Agendamento(duracao=60, status=STATUS_PADRAO, encaixe=False)

    erro = _apply_scalars(data, agendamento)
    if erro:
        return jsonify({
            'success': False,
            'erro': erro
        }), 400

    falha = _resolve_references(tenant, data, agendamento)
    if falha:
        mensagem, status = falha
        return jsonify({
            'success': False,
            'erro': mensagem
        }), status

    try:
        agendamento.codigo_confirmacao = gerar_codigo_unico()
        tenant.add(agendamento)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Create appointment failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao criar agendamento'
        }), 500

    log_audit('agendamento', 'create', dentista_id=tenant.dentista_id, entity_id=agendamento.id,
              details={'data': agendamento.data.isoformat(), 'horario': agendamento.horario})

    return jsonify({
        'success': True,
        'message': 'Agendamento criado!',
        'agendamento': agendamento.to_dict()
    }), 201


@agendamentos_bp.route('/<agendamento_id>', methods=['GET'])
@tenant_required
def get_agendamento(agendamento_id, tenant):
    """Get single appointment by ID"""
    record_id = validar_id(agendamento_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    agendamento = tenant.get(Agendamento, record_id)
    if not agendamento:
        return jsonify({
            'success': False,
            'erro': 'Agendamento não encontrado'
        }), 404

    return jsonify({
        'success': True,
        'agendamento': agendamento.to_dict()
    }), 200


@agendamentos_bp.route('/<agendamento_id>', methods=['PUT'])
@tenant_required
def update_agendamento(agendamento_id, tenant):
    """Update the supplied appointment fields"""
    record_id = validar_id(agendamento_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    agendamento = tenant.get(Agendamento, record_id)
    if not agendamento:
        return jsonify({
            'success': False,
            'erro': 'Agendamento não encontrado'
        }), 404

    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    erro = _apply_scalars(data, agendamento)
    if erro:
        db.session.rollback()
        return jsonify({
            'success': False,
            'erro': erro
        }), 400

    falha = _resolve_references(tenant, data, agendamento)
    if falha:
        db.session.rollback()
        mensagem, status = falha
        return jsonify({
            'success': False,
            'erro': mensagem
        }), status

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Update appointment %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao atualizar agendamento'
        }), 500

    log_audit('agendamento', 'update', dentista_id=tenant.dentista_id, entity_id=record_id)

    return jsonify({
        'success': True,
        'message': 'Agendamento atualizado!',
        'agendamento': agendamento.to_dict()
    }), 200


@agendamentos_bp.route('/<agendamento_id>', methods=['DELETE'])
@tenant_required
def delete_agendamento(agendamento_id, tenant):
    """Hard delete"""
    record_id = validar_id(agendamento_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    agendamento = tenant.get(Agendamento, record_id)
    if not agendamento:
        return jsonify({
            'success': False,
            'erro': 'Agendamento não encontrado'
        }), 404

    try:
        db.session.delete(agendamento)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Delete appointment %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao remover agendamento'
        }), 500

    log_audit('agendamento', 'delete', dentista_id=tenant.dentista_id, entity_id=record_id)

    return jsonify({
        'success': True,
        'message': 'Agendamento removido!'
    }), 200
