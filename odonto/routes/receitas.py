from flask import Blueprint, jsonify
from odonto.models import Receita, Paciente
from odonto.extensions import db
from odonto.utils import tenant_required, log_audit, json_body, campo_nao_texto, validar_id, empty_to_none
import logging

logger = logging.getLogger(__name__)

receitas_bp = Blueprint('receitas', __name__, url_prefix='/api/receitas')

TEXTO_CAMPOS = ('tipo', 'observacoes')


def _medicamentos_validos(medicamentos):
    """Non-empty list whose items are free-text lines or item objects."""
    return (
        isinstance(medicamentos, list)
        and len(medicamentos) > 0
        and all(isinstance(m, (str, dict)) for m in medicamentos)
    )


@receitas_bp.route('/<paciente_id>', methods=['GET'])
@tenant_required
def list_receitas(paciente_id, tenant):
    """Prescriptions for one patient, newest first"""
    paciente = tenant.get(Paciente, validar_id(paciente_id))
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    try:
        receitas = (
            tenant.query(Receita)
            .filter(Receita.paciente_id == paciente.id)
            .order_by(Receita.criado_em.desc(), Receita.id.desc())
            .all()
        )
    except Exception as e:
        logger.error("List prescriptions failed for patient %s: %s", paciente.id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao buscar receitas'
        }), 500

    return jsonify({
        'success': True,
        'receitas': [r.to_dict() for r in receitas],
        'total': len(receitas)
    }), 200


@receitas_bp.route('', methods=['POST'])
@tenant_required
def create_receita(tenant):
    """Body: pacienteId, medicamentos (non-empty list), tipo?, observacoes?"""
    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    medicamentos = data.get('medicamentos')
    if empty_to_none(data.get('pacienteId')) is None or not medicamentos:
        return jsonify({
            'success': False,
            'erro': 'Paciente e medicamentos obrigatórios'
        }), 400

    if not _medicamentos_validos(medicamentos):
        return jsonify({
            'success': False,
            'erro': 'Medicamentos devem ser uma lista'
        }), 400

    campo = campo_nao_texto(data, TEXTO_CAMPOS)
    if campo:
        return jsonify({
            'success': False,
            'erro': f'Campo "{campo}" deve ser texto'
        }), 400

    paciente = tenant.get(Paciente, validar_id(data.get('pacienteId')))
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    try:
        receita = Receita(
            paciente_id=paciente.id,
            tipo=empty_to_none(data.get('tipo')) or 'simples',
            medicamentos=medicamentos,
            observacoes=empty_to_none(data.get('observacoes'))
        )
        tenant.add(receita)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Create prescription failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao salvar receita'
        }), 500

    log_audit('receita', 'create', dentista_id=tenant.dentista_id, entity_id=receita.id,
              details={'paciente_id': paciente.id, 'itens': len(medicamentos)})

    return jsonify({
        'success': True,
        'message': 'Receita salva!',
        'receita': receita.to_dict()
    }), 201


@receitas_bp.route('/<receita_id>', methods=['DELETE'])
@tenant_required
def delete_receita(receita_id, tenant):
    receita = tenant.get(Receita, validar_id(receita_id))
    if not receita:
        return jsonify({
            'success': False,
            'erro': 'Receita não encontrada'
        }), 404

    record_id = receita.id
    try:
        db.session.delete(receita)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Delete prescription %s failed: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao remover receita'
        }), 500

    log_audit('receita', 'delete', dentista_id=tenant.dentista_id, entity_id=record_id)

    return jsonify({
        'success': True,
        'message': 'Receita removida'
    }), 200
