from flask import Blueprint, jsonify
from odonto.models import Prontuario, Paciente
from odonto.extensions import db
from odonto.utils import (
    tenant_required, log_audit, json_body, campo_nao_texto, validar_id, parse_date, parse_valor, empty_to_none
)
from datetime import date
import logging

logger = logging.getLogger(__name__)

prontuarios_bp = Blueprint('prontuarios', __name__, url_prefix='/api/prontuarios')

TEXTO_CAMPOS = ('descricao', 'procedimento', 'dente')


@prontuarios_bp.route('/<paciente_id>', methods=['GET'])
@tenant_required
def list_prontuarios(paciente_id, tenant):
    """Clinical notes for one patient, newest first"""
    record_id = validar_id(paciente_id)
    if not record_id:
        return jsonify({
            'success': False,
            'erro': 'ID de paciente inválido'
        }), 400

    if not tenant.get(Paciente, record_id):
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    try:
        prontuarios = (
            tenant.query(Prontuario)
            .filter(Prontuario.paciente_id == record_id)
            .order_by(Prontuario.data.desc(), Prontuario.id.desc())
            .all()
        )
    except Exception as e:
        logger.error("List clinical notes failed for patient %s: %s", record_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao buscar prontuário'
        }), 500

    return jsonify({
        'success': True,
        'prontuarios': [p.to_dict() for p in prontuarios],
        'total': len(prontuarios)
    }), 200


@prontuarios_bp.route('', methods=['POST'])
@tenant_required
def create_prontuario(tenant):
    """Append a clinical note. Body: pacienteId, descricao, data?, procedimento?, dente?, valor?"""
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

    descricao = empty_to_none(data.get('descricao'))
    if not data.get('pacienteId') or not descricao:
        return jsonify({
            'success': False,
            'erro': 'Paciente e descrição obrigatórios'
        }), 400

    paciente = tenant.get(Paciente, validar_id(data.get('pacienteId')))
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    dia = date.today()
    if empty_to_none(data.get('data')):
        dia = parse_date(data['data'])
        if not dia:
            return jsonify({
                'success': False,
                'erro': 'Data inválida. Use AAAA-MM-DD'
            }), 400

    valor = None
    if data.get('valor') not in (None, ''):
        valor = parse_valor(data['valor'])
        if valor is None:
            return jsonify({
                'success': False,
                'erro': 'Valor inválido'
            }), 400

    try:
        prontuario = Prontuario(
            paciente_id=paciente.id,
            data=dia,
            descricao=descricao.strip(),
            procedimento=empty_to_none(data.get('procedimento')),
            dente=empty_to_none(data.get('dente')),
            valor=valor
        )
        tenant.add(prontuario)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Create clinical note failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao salvar prontuário'
        }), 500

    log_audit('prontuario', 'create', dentista_id=tenant.dentista_id, entity_id=prontuario.id, details={'paciente_id': paciente.id})

    return jsonify({
        'success': True,
        'message': 'Registro adicionado ao prontuário!',
        'prontuario': prontuario.to_dict()
    }), 201
