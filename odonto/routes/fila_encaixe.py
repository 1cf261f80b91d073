from flask import Blueprint, request, jsonify
from odonto.models import FilaEncaixe
from odonto.extensions import db
from odonto.utils import tenant_required, log_audit, json_body, campo_nao_texto, validar_id, parse_bool, empty_to_none
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

fila_encaixe_bp = Blueprint('fila_encaixe', __name__, url_prefix='/api/fila-encaixe')

TEXTO_CAMPOS = ('nome', 'telefone', 'motivo')


def _not_found():
    return jsonify({
        'success': False,
        'erro': 'Registro não encontrado'
    }), 404


@fila_encaixe_bp.route('', methods=['GET'])
@tenant_required
def list_fila(tenant):
    """
    Waiting list, urgent first then oldest.
    Query params: incluir_resolvidos (default false)
    """
    query = tenant.query(FilaEncaixe)
    if not parse_bool(request.args.get('incluir_resolvidos', 'false')):
        query = query.filter(FilaEncaixe.resolvido.is_(False))

    try:
        itens = query.order_by(FilaEncaixe.urgente.desc(), FilaEncaixe.criado_em.asc(), FilaEncaixe.id.asc()).all()
    except Exception as e:
        logger.error("List overflow queue failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao listar fila de encaixe'
        }), 500

    return jsonify({
        'success': True,
        'fila': [i.to_dict() for i in itens],
        'total': len(itens)
    }), 200


@fila_encaixe_bp.route('', methods=['POST'])
@tenant_required
def create_item(tenant):
    """Body: nome, telefone, motivo?, urgente?"""
    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    campo = campo_nao_texto(data, TEXTO_CAMPOS)
    if campo:
        return jsonify({
            'success': False,
            'erro': f'Campo "{campo}" deve ser texto'
        }), 400

    nome = empty_to_none(data.get('nome'))
    telefone = empty_to_none(data.get('telefone'))
    if not nome or not telefone:
        return jsonify({
            'success': False,
            'erro': 'Nome e telefone obrigatórios'
        }), 400

    try:
        item = FilaEncaixe(
            nome=nome.strip(),
            telefone=telefone.strip(),
            motivo=empty_to_none(data.get('motivo')),
            urgente=parse_bool(data.get('urgente', False)),
            resolvido=False
        )
        tenant.add(item)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Add to overflow queue failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao adicionar à fila'
        }), 500

    log_audit('fila_encaixe', 'create', dentista_id=tenant.dentista_id, entity_id=item.id)

    return jsonify({
        'success': True,
        'message': 'Adicionado à fila de encaixe!',
        'item': item.to_dict()
    }), 201


@fila_encaixe_bp.route('/<item_id>/resolver', methods=['PATCH'])
@tenant_required
def resolver_item(item_id, tenant):
    item = tenant.get(FilaEncaixe, validar_id(item_id))
    if not item:
        return _not_found()

    try:
        item.resolvido = True
        item.resolvido_em = datetime.utcnow()
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Resolve queue item %s failed: %s", item_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao resolver encaixe'
        }), 500

    log_audit('fila_encaixe', 'resolve', dentista_id=tenant.dentista_id, entity_id=item.id)

    return jsonify({
        'success': True,
        'message': 'Encaixe resolvido!',
        'item': item.to_dict()
    }), 200


@fila_encaixe_bp.route('/<item_id>', methods=['DELETE'])
@tenant_required
def delete_item(item_id, tenant):
    item = tenant.get(FilaEncaixe, validar_id(item_id))
    if not item:
        return _not_found()

    record_id = item.id
    try:
        db.session.delete(item)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Delete queue item %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao remover da fila'
        }), 500

    log_audit('fila_encaixe', 'delete', dentista_id=tenant.dentista_id, entity_id=record_id)

    return jsonify({
        'success': True,
        'message': 'Removido da fila!'
    }), 200
