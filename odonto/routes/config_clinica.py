from flask import Blueprint, jsonify
from odonto.models import ConfigClinica
from odonto.models.config_clinica import CONFIG_PADRAO
from odonto.extensions import db
from odonto.utils import tenant_required, log_audit, json_body, parse_horario, parse_inteiro_positivo, empty_to_none
import logging

logger = logging.getLogger(__name__)

config_clinica_bp = Blueprint('config_clinica', __name__, url_prefix='/api/config-clinica')

CAMPOS_HORARIO = ('hora_abre', 'hora_fecha')
CAMPOS_INTEIROS = ('intervalo_padrao', 'periodo_confirmacao')


@config_clinica_bp.route('', methods=['GET'])
@tenant_required
def get_config(tenant):
    """Stored settings, or the defaults when the account never saved any"""
    config = tenant.query(ConfigClinica).first()
    return jsonify({
        'success': True,
        'config': config.to_dict() if config else dict(CONFIG_PADRAO)
    }), 200


@config_clinica_bp.route('', methods=['PUT'])
@tenant_required
def save_config(tenant):
    """Create or update the account's single settings row"""
    data = json_body()
    if not data:
        return jsonify({
            'success': False,
            'erro': 'Corpo da requisição deve ser JSON'
        }), 400

    valores = {}
    for campo in CONFIG_PADRAO:
        if campo not in data:
            continue
        valor = empty_to_none(data.get(campo))
        if valor is not None and campo in CAMPOS_HORARIO:
            valor = parse_horario(valor)
            if not valor:
                return jsonify({
                    'success': False,
                    'erro': f'Horário inválido em "{campo}". Use HH:MM'
                }), 400
        elif valor is not None and campo in CAMPOS_INTEIROS:
            valor = parse_inteiro_positivo(valor)
            if valor is None:
                return jsonify({
                    'success': False,
                    'erro': f'Valor inválido em "{campo}". Use um inteiro positivo'
                }), 400
        elif valor is not None and not isinstance(valor, str):
            return jsonify({
                'success': False,
                'erro': f'Campo "{campo}" deve ser texto'
            }), 400
        valores[campo] = valor

    try:
        config = tenant.query(ConfigClinica).first()
        if not config:
            config = tenant.add(ConfigClinica())
        for campo, valor in valores.items():
            setattr(config, campo, valor)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error("Save clinic settings failed: %s", e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao salvar configurações'
        }), 500

    log_audit('config_clinica', 'update', dentista_id=tenant.dentista_id, entity_id=config.id, details={'campos': sorted(valores)})

    return jsonify({
        'success': True,
        'message': 'Configurações salvas!',
        'config': config.to_dict()
    }), 200
