from flask import Blueprint, request, jsonify
from odonto.models import Paciente
from odonto.models.paciente import PACIENTE_CAMPOS, BOOLEAN_CAMPOS, normalizar_busca
from odonto.extensions import db
from odonto.utils import tenant_required, log_audit, json_body, validar_id, parse_date, parse_bool, empty_to_none
from sqlalchemy import or_, extract
from datetime import date
import logging

logger = logging.getLogger(__name__)

pacientes_bp = Blueprint('pacientes', __name__, url_prefix='/api/pacientes')

LIMITE_PADRAO = 50
LIMITE_MAXIMO = 200


def _apply_fields(paciente, data):
    """
    Copy supplied payload keys onto the patient.
    Returns an error message for the first invalid value, or None.
    """
    for chave, coluna in PACIENTE_CAMPOS.items():
        if chave not in data:
            continue
        valor = data.get(chave)
        if coluna == 'data_nascimento':
            valor = empty_to_none(valor)
            if valor is not None:
                valor = parse_date(valor)
                if valor is None:
                    return 'Data de nascimento inválida. Use AAAA-MM-DD'
        elif coluna in BOOLEAN_CAMPOS:
            valor = parse_bool(valor)
        else:
            valor = empty_to_none(valor)
            if valor is not None and not isinstance(valor, str):
                return f'Campo "{chave}" deve ser texto'
            if valor is not None:
                valor = valor.strip()
        setattr(paciente, coluna, valor)
    return None


def _validate(paciente):
    """Invariants checked after fields are applied. Returns an error message or None."""
    if not paciente.nome or len(paciente.nome.strip()) < 2:
        return 'Nome é obrigatório (mínimo 2 caracteres)'
    if paciente.menor_idade and not paciente.responsavel_nome:
        return 'Paciente menor de idade exige o nome do responsável'
    return None


@pacientes_bp.route('', methods=['GET'])
@tenant_required
def list_pacientes(tenant):
    """
    List active patients with search and pagination
    Query params: busca, limit, offset
    """
    limit = request.args.get('limit', LIMITE_PADRAO, type=int)
    offset = request.args.get('offset', 0, type=int)
    busca = request.args.get('busca', '', type=str).strip()

    if limit < 1 or limit > LIMITE_MAXIMO:
        limit = LIMITE_PADRAO
    if offset < 0:
        offset = 0

    try:
        ativos = tenant.query(Paciente).filter(Paciente.ativo.is_(True))

        query = ativos
        if busca:
            termo = f'%{busca}%'
            query = query.filter(or_(
                Paciente.nome_busca.like(f'%{normalizar_busca(busca)}%'),
                Paciente.cpf.like(termo),
                Paciente.telefone.like(termo),
                Paciente.celular.like(termo)
            ))

        total = query.count()
        pacientes = query.order_by(Paciente.nome.asc()).limit(limit).offset(offset).all()

        stats = {
            'total': ativos.count(),
            'completos': ativos.filter(Paciente.cadastro_completo.is_(True)).count(),
            'incompletos': ativos.filter(or_(
                Paciente.cadastro_completo.is_(False),
                Paciente.cadastro_completo.is_(None)
            )).count(),
            'menores': ativos.filter(Paciente.menor_idade.is_(True)).count(),
        }
    except Exception as e:
        logger.error("List patients failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao listar pacientes'
        }), 500

    return jsonify({
        'success': True,
        'pacientes': [p.to_dict() for p in pacientes],
        'total': total,
        'stats': stats,
        'limit': limit,
        'offset': offset,
        'hasMore': offset + len(pacientes) < total
    }), 200


@pacientes_bp.route('/aniversariantes', methods=['GET'])
@tenant_required
def list_aniversariantes(tenant):
    """Active patients whose birthday is today"""
    hoje = date.today()
    try:
        pacientes = (
            tenant.query(Paciente)
            .filter(
                Paciente.ativo.is_(True),
                Paciente.data_nascimento.isnot(None),
                extract('month', Paciente.data_nascimento) == hoje.month,
                extract('day', Paciente.data_nascimento) == hoje.day
            )
            .order_by(Paciente.nome.asc())
            .all()
        )
    except Exception as e:
        logger.error("Birthday lookup failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao buscar aniversariantes'
        }), 500

    return jsonify({
        'success': True,
        'pacientes': [{
            'id': str(p.id),
            'nome': p.nome,
            'dataNascimento': p.data_nascimento.isoformat(),
            'celular': p.celular or p.telefone,
        } for p in pacientes]
    }), 200


@pacientes_bp.route('/<paciente_id>', methods=['GET'])
@tenant_required
def get_paciente(paciente_id, tenant):
    """
    Get single patient by ID.
    Soft-deleted patients are still returned so historical references resolve.
    """
    record_id = validar_id(paciente_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID de paciente inválido'
        }), 400

    paciente = tenant.get(Paciente, record_id)
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    return jsonify({
        'success': True,
        'paciente': paciente.to_dict()
    }), 200


@pacientes_bp.route('', methods=['POST'])
@tenant_required
def create_paciente(tenant):
    """Create new patient"""
    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    paciente = Paciente(ativo=True)
    erro = _apply_fields(paciente, data) or _validate(paciente)
    if erro:
        return jsonify({
            'success': False,
            'erro': erro
        }), 400

    try:
        paciente.atualizar_derivados()
        tenant.add(paciente)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Create patient failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao cadastrar paciente'
        }), 500

    log_audit('paciente', 'create', dentista_id=tenant.dentista_id, entity_id=paciente.id, details={'nome': paciente.nome})

    return jsonify({
        'success': True,
        'message': 'Paciente cadastrado com sucesso!' if paciente.cadastro_completo
        else 'Paciente cadastrado (cadastro incompleto - não pode emitir NFS-e)',
        'paciente': paciente.to_dict()
    }), 201


@pacientes_bp.route('/<paciente_id>', methods=['PUT'])
@tenant_required
def update_paciente(paciente_id, tenant):
    """Update the supplied patient fields"""
    record_id = validar_id(paciente_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    paciente = tenant.get(Paciente, record_id)
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    erro = _apply_fields(paciente, data) or _validate(paciente)
    if erro:
        db.session.rollback()
        return jsonify({
            'success': False,
            'erro': erro
        }), 400

    try:
        paciente.atualizar_derivados()
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Update patient %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao atualizar paciente'
        }), 500

    log_audit('paciente', 'update', dentista_id=tenant.dentista_id, entity_id=paciente.id)

    return jsonify({
        'success': True,
        'message': 'Paciente atualizado!' if paciente.cadastro_completo
        else 'Paciente atualizado (cadastro incompleto)',
        'paciente': paciente.to_dict()
    }), 200


@pacientes_bp.route('/<paciente_id>', methods=['DELETE'])
@tenant_required
def delete_paciente(paciente_id, tenant):
    """Soft-delete: the row stays for appointments and clinical notes that reference it"""
    record_id = validar_id(paciente_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID inválido'
        }), 400

    paciente = tenant.get(Paciente, record_id)
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    try:
        paciente.ativo = False
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Delete patient %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao remover paciente'
        }), 500

    log_audit('paciente', 'delete', dentista_id=tenant.dentista_id, entity_id=record_id, details={'nome': paciente.nome})

    return jsonify({
        'success': True,
        'message': 'Paciente removido!'
    }), 200
