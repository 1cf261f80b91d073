from flask import Blueprint, jsonify
from odonto.models import Anamnese, Paciente
from odonto.models.anamnese import BOOLEAN_CAMPOS, TEXTO_CAMPOS
from odonto.extensions import db
from odonto.utils import (
    tenant_required, log_audit, json_body, campo_nao_texto, validar_id, parse_bool, parse_inteiro_positivo,
    empty_to_none
)
from decimal import Decimal, InvalidOperation
import logging

logger = logging.getLogger(__name__)

anamnese_bp = Blueprint('anamnese', __name__, url_prefix='/api/anamnese')

# Column precision bounds: peso NUMERIC(5,1), altura NUMERIC(3,2)
LIMITES_MEDIDAS = {
    'peso': Decimal('1000'),
    'altura': Decimal('10'),
}


def _parse_medida(valor, limite):
    """Positive decimal below ``limite``, None otherwise."""
    if isinstance(valor, (bool, list, dict)):
        return None
    try:
        numero = Decimal(str(valor))
    except (InvalidOperation, ValueError):
        return None
    if not numero.is_finite() or numero <= 0 or numero >= limite:
        return None
    return numero


def _find_paciente(tenant, paciente_id):
    return tenant.get(Paciente, validar_id(paciente_id))


def _find_anamnese(tenant, paciente_id):
    return tenant.query(Anamnese).filter(Anamnese.paciente_id == paciente_id).first()


def _apply_fields(anamnese, data):
    """
    Replace every questionnaire field from the payload; omitted fields are cleared.
    Returns an error message or None.
    """
    campo = campo_nao_texto(data, TEXTO_CAMPOS)
    if campo:
        return f'Campo "{campo}" deve ser texto'

    for medida, limite in LIMITES_MEDIDAS.items():
        valor = empty_to_none(data.get(medida))
        if valor is not None:
            valor = _parse_medida(valor, limite)
            if valor is None:
                return f'Valor inválido em "{medida}"'
        setattr(anamnese, medida, valor)

    frequencia = empty_to_none(data.get('frequencia_cardiaca'))
    if frequencia is not None:
        frequencia = parse_inteiro_positivo(frequencia)
        if frequencia is None:
            return 'Valor inválido em "frequencia_cardiaca"'
    anamnese.frequencia_cardiaca = frequencia

    for campo in BOOLEAN_CAMPOS:
        setattr(anamnese, campo, parse_bool(data.get(campo)))

    for campo in TEXTO_CAMPOS:
        valor = empty_to_none(data.get(campo))
        setattr(anamnese, campo, valor.strip() if valor else None)
    return None


@anamnese_bp.route('/<paciente_id>', methods=['GET'])
@tenant_required
def get_anamnese(paciente_id, tenant):
    """The patient's questionnaire, or null when never filled in"""
    paciente = _find_paciente(tenant, paciente_id)
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    try:
        anamnese = _find_anamnese(tenant, paciente.id)
    except Exception as e:
        logger.error("Medical history lookup failed for patient %s: %s", paciente.id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao buscar anamnese'
        }), 500

    return jsonify({
        'success': True,
        'anamnese': anamnese.to_dict() if anamnese else None
    }), 200


@anamnese_bp.route('/<paciente_id>/alertas', methods=['GET'])
@tenant_required
def get_alertas(paciente_id, tenant):
    """Clinical alerts derived from the questionnaire; empty when there is none"""
    paciente = _find_paciente(tenant, paciente_id)
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    try:
        anamnese = _find_anamnese(tenant, paciente.id)
    except Exception as e:
        logger.error("Alert lookup failed for patient %s: %s", paciente.id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao buscar alertas'
        }), 500

    return jsonify({
        'success': True,
        'alertas': anamnese.alertas() if anamnese else []
    }), 200


@anamnese_bp.route('', methods=['POST'])
@anamnese_bp.route('/<paciente_id>', methods=['POST'])
@tenant_required
def save_anamnese(tenant, paciente_id=None):
    """
    Create or replace the patient's questionnaire.
    The patient comes from the path or from ``pacienteId`` in the body.
    """
    data = json_body()
    if data is None:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    paciente_id = paciente_id or data.get('pacienteId')
    if empty_to_none(paciente_id) is None:
        return jsonify({
            'success': False,
            'erro': 'Paciente obrigatório'
        }), 400

    paciente = _find_paciente(tenant, paciente_id)
    if not paciente:
        return jsonify({
            'success': False,
            'erro': 'Paciente não encontrado'
        }), 404

    anamnese = _find_anamnese(tenant, paciente.id)
    criada = anamnese is None
    if criada:
        anamnese = Anamnese(paciente_id=paciente.id)

    erro = _apply_fields(anamnese, data)
    if erro:
        db.session.rollback()
        return jsonify({
            'success': False,
            'erro': erro
        }), 400

    try:
        if criada:
            tenant.add(anamnese)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Save medical history failed for patient %s: %s", paciente.id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao salvar anamnese'
        }), 500

    log_audit('anamnese', 'create' if criada else 'update', dentista_id=tenant.dentista_id, entity_id=anamnese.id,
              details={'paciente_id': paciente.id})

    return jsonify({
        'success': True,
        'message': 'Anamnese salva!',
        'anamnese': anamnese.to_dict()
    }), 200
