from flask import Blueprint, request, jsonify
from odonto.models import Profissional
from odonto.models.profissional import HORARIO_CAMPOS
from odonto.extensions import db
from odonto.utils import tenant_required, log_audit, json_body, campo_nao_texto, validar_id, parse_horario, empty_to_none
import logging

logger = logging.getLogger(__name__)

dentistas_bp = Blueprint('dentistas', __name__, url_prefix='/api/dentistas')

PERFIL_CAMPOS = ('nome', 'cro', 'especialidade', 'icone', 'foto', 'cor')


def _apply_horario(profissional, data):
    """Copy agenda-grid fields present in the payload. Returns an error message or None."""
    if 'intervalo_minutos' in data:
        try:
            intervalo = int(data.get('intervalo_minutos'))
        except (TypeError, ValueError):
            return 'Intervalo inválido'
        if intervalo <= 0:
            return 'Intervalo inválido'
        profissional.intervalo_minutos = intervalo

    for campo in HORARIO_CAMPOS:
        if campo == 'intervalo_minutos' or campo not in data:
            continue
        horario = parse_horario(data.get(campo))
        if not horario:
            return f'Horário inválido em "{campo}". Use HH:MM'
        setattr(profissional, campo, horario)
    return None


def _get_ativo(tenant, profissional_id):
    return tenant.query(Profissional).filter(
        Profissional.id == profissional_id,
        Profissional.ativo.is_(True)
    ).first()


@dentistas_bp.route('', methods=['GET'])
@tenant_required
def list_profissionais(tenant):
    """Active practitioners of the account"""
    try:
        profissionais = (
            tenant.query(Profissional)
            .filter(Profissional.ativo.is_(True))
            .order_by(Profissional.nome.asc())
            .all()
        )
    except Exception as e:
        logger.error("List practitioners failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao listar profissionais'
        }), 500

    return jsonify({
        'success': True,
        'dentistas': [p.to_dict() for p in profissionais],
        'total': len(profissionais)
    }), 200


@dentistas_bp.route('/<profissional_id>', methods=['GET'])
@tenant_required
def get_profissional(profissional_id, tenant):
    record_id = validar_id(profissional_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    profissional = _get_ativo(tenant, record_id)
    if not profissional:
        return jsonify({
            'success': False,
            'erro': 'Profissional não encontrado'
        }), 404

    return jsonify({
        'success': True,
        'dentista': profissional.to_dict()
    }), 200


@dentistas_bp.route('', methods=['POST'])
@tenant_required
def create_profissional(tenant):
    """Add a practitioner; unset schedule fields take the model defaults"""
    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    campo = campo_nao_texto(data, PERFIL_CAMPOS)
    if campo:
        return jsonify({
            'success': False,
            'erro': f'Campo "{campo}" deve ser texto'
        }), 400

    nome = empty_to_none(data.get('nome'))
    if not nome:
        return jsonify({
            'success': False,
            'erro': 'Nome é obrigatório'
        }), 400

    profissional = Profissional(
        nome=nome.strip(),
        cro=empty_to_none(data.get('cro')),
        especialidade=empty_to_none(data.get('especialidade')) or 'Clínico Geral',
        icone=empty_to_none(data.get('icone')) or '🦷',
        foto=empty_to_none(data.get('foto')),
        cor=empty_to_none(data.get('cor')) or '#2d7a5f',
        intervalo_minutos=30,
        hora_entrada='08:00',
        hora_saida='18:00',
        almoco_inicio='12:00',
        almoco_fim='13:00',
        ativo=True
    )

    erro = _apply_horario(profissional, data)
    if erro:
        return jsonify({
            'success': False,
            'erro': erro
        }), 400

    try:
        tenant.add(profissional)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Create practitioner failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao cadastrar profissional'
        }), 500

    log_audit('profissional', 'create', dentista_id=tenant.dentista_id, entity_id=profissional.id, details={'nome': profissional.nome})

    return jsonify({
        'success': True,
        'message': 'Profissional cadastrado!',
        'dentista': profissional.to_dict()
    }), 201


@dentistas_bp.route('/<profissional_id>', methods=['PUT'])
@tenant_required
def update_profissional(profissional_id, tenant):
    """Update the supplied profile and schedule fields"""
    record_id = validar_id(profissional_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    profissional = _get_ativo(tenant, record_id)
    if not profissional:
        return jsonify({
            'success': False,
            'erro': 'Profissional não encontrado'
        }), 404

    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    campo = campo_nao_texto(data, PERFIL_CAMPOS)
    if campo:
        return jsonify({
            'success': False,
            'erro': f'Campo "{campo}" deve ser texto'
        }), 400

    if 'nome' in data and not empty_to_none(data.get('nome')):
        return jsonify({
            'success': False,
            'erro': 'Nome é obrigatório'
        }), 400

    for campo in PERFIL_CAMPOS:
        if campo in data:
            valor = empty_to_none(data.get(campo))
            setattr(profissional, campo, valor.strip() if isinstance(valor, str) else valor)

    erro = _apply_horario(profissional, data)
    if erro:
        db.session.rollback()
        return jsonify({
            'success': False,
            'erro': erro
        }), 400

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Update practitioner %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao atualizar profissional'
        }), 500

    log_audit('profissional', 'update', dentista_id=tenant.dentista_id, entity_id=record_id)

    return jsonify({
        'success': True,
        'message': 'Profissional atualizado!',
        'dentista': profissional.to_dict()
    }), 200


@dentistas_bp.route('/<profissional_id>/config', methods=['PATCH'])
@tenant_required
def update_config_profissional(profissional_id, tenant):
    """Agenda grid only: interval, working hours and lunch break"""
    record_id = validar_id(profissional_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    profissional = _get_ativo(tenant, record_id)
    if not profissional:
        return jsonify({
            'success': False,
            'erro': 'Profissional não encontrado'
        }), 404

    data = json_body() or {}
    erro = _apply_horario(profissional, data)
    if erro:
        db.session.rollback()
        return jsonify({
            'success': False,
            'erro': erro
        }), 400

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Update agenda config for %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao salvar configuração'
        }), 500

    return jsonify({
        'success': True,
        'message': 'Configuração salva!',
        'config': profissional.config_dict()
    }), 200


@dentistas_bp.route('/<profissional_id>', methods=['DELETE'])
@tenant_required
def delete_profissional(profissional_id, tenant):
    """
    Deactivate a practitioner.
    Query params: senha (the account password, required)
    """
    record_id = validar_id(profissional_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    senha = request.args.get('senha', '', type=str)
    if not senha:
        return jsonify({
            'success': False,
            'erro': 'Senha obrigatória para excluir'
        }), 400

    if not tenant.dentista.check_senha(senha):
        return jsonify({
            'success': False,
            'erro': 'Senha incorreta'
        }), 403

    profissional = _get_ativo(tenant, record_id)
    if not profissional:
        return jsonify({
            'success': False,
            'erro': 'Profissional não encontrado'
        }), 404

    try:
        profissional.ativo = False
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Delete practitioner %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao remover profissional'
        }), 500

    log_audit('profissional', 'delete', dentista_id=tenant.dentista_id, entity_id=record_id, details={'nome': profissional.nome})

    return jsonify({
        'success': True,
        'message': 'Profissional removido!'
    }), 200
