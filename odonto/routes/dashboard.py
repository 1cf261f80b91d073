from flask import Blueprint, jsonify
from odonto.services import montar_dashboard
from odonto.utils import tenant_required
import logging

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint('dashboard', __name__, url_prefix='/api/dashboard')


@dashboard_bp.route('', methods=['GET'])
@tenant_required
def get_dashboard(tenant):
    """Headline figures for the account's home screen"""
    try:
        dashboard = montar_dashboard(tenant)
    except Exception as e:
        logger.error("Dashboard failed for account %s: %s", tenant.dentista_id, e, exc_info=True)
        return jsonify({
            'success': False,
            'erro': 'Erro ao carregar dashboard'
        }), 500

    return jsonify({
        'success': True,
        'dashboard': dashboard
    }), 200
