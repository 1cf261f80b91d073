from flask import Blueprint, jsonify
from odonto.models import Atestado, Paciente
from odonto.extensions import db
from odonto.utils import (
    tenant_required, log_audit, json_body, campo_nao_texto, validar_id, parse_inteiro_positivo, empty_to_none
)
import logging

logger = logging.getLogger(__name__)

atestados_bp = Blueprint('atestados', __name__, url_prefix='/api/atestados')

TEXTO_CAMPOS = ('tipo', 'cid', 'horario', 'conteudo')


@atestados_bp.route('/<paciente_id>', methods=['GET'])
@tenant_required
def list_atestados(paciente_id, tenant):
    """Certificates for one patient, newest first"""
    paciente = tenant.get(Paciente, validar_id(paciente_id))
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    try:
        atestados = (
            tenant.query(Atestado)
            .filter(Atestado.paciente_id == paciente.id)
            .order_by(Atestado.criado_em.desc(), Atestado.id.desc())
            .all()
        )
    except Exception as e:
        logger.error("List certificates failed for patient %s: %s", paciente.id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao buscar atestados'
        }), 500

    return jsonify({
        'success': True,
        'atestados': [a.to_dict() for a in atestados],
        'total': len(atestados)
    }), 200


@atestados_bp.route('', methods=['POST'])
@tenant_required
def create_atestado(tenant):
    """Body: pacienteId, tipo?, dias?, cid?, horario?, conteudo?"""
    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    if empty_to_none(data.get('pacienteId')) is None:
        return jsonify({
            'success': False,
            'erro': 'Paciente obrigatório'
        }), 400

    campo = campo_nao_texto(data, TEXTO_CAMPOS)
    if campo:
        return jsonify({
            'success': False,
            'erro': f'Campo "{campo}" deve ser texto'
        }), 400

    dias = 1
    if empty_to_none(data.get('dias')) is not None:
        dias = parse_inteiro_positivo(data['dias'])
        if dias is None:
            return jsonify({
                'success': False,
                'erro': 'Dias inválido'
            }), 400

    paciente = tenant.get(Paciente, validar_id(data.get('pacienteId')))
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    try:
        atestado = Atestado(
            paciente_id=paciente.id,
            tipo=empty_to_none(data.get('tipo')) or 'atestado',
            dias=dias,
            cid=empty_to_none(data.get('cid')),
            horario=empty_to_none(data.get('horario')),
            conteudo=empty_to_none(data.get('conteudo'))
        )
        tenant.add(atestado)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Create certificate failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao salvar atestado'
        }), 500

    log_audit('atestado', 'create', dentista_id=tenant.dentista_id, entity_id=atestado.id,
              details={'paciente_id': paciente.id, 'tipo': atestado.tipo})

    return jsonify({
        'success': True,
        'message': 'Atestado salvo!',
        'atestado': atestado.to_dict()
    }), 201


@atestados_bp.route('/<atestado_id>', methods=['DELETE'])
@tenant_required
def delete_atestado(atestado_id, tenant):
    atestado = tenant.get(Atestado, validar_id(atestado_id))
    if not atestado:
        return jsonify({
            'success': False,
            'erro': 'Atestado não encontrado'
        }), 404

    record_id = atestado.id
    try:
        db.session.delete(atestado)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Delete certificate %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao remover atestado'
        }), 500

    log_audit('atestado', 'delete', dentista_id=tenant.dentista_id, entity_id=record_id)

    return jsonify({
        'success': True,
        'message': 'Atestado removido'
    }), 200
