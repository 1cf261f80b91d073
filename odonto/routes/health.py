"""
Service info and health probes for monitoring and load balancers
"""
from flask import Blueprint, jsonify, current_app
from odonto.extensions import db
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__)


def _database_ok():
    try:
        db.session.execute(db.text('SELECT 1'))
        return True
    except Exception as e:
        logger.warning("Database probe failed: %s", e)
        db.session.rollback()
        return False


@health_bp.route('/', methods=['GET'])
def service_info():
    return jsonify({
        'name': current_app.config['SERVICE_NAME'],
        'version': current_app.config['SERVICE_VERSION'],
        'status': 'online',
        'database': db.engine.dialect.name,
        'timestamp': datetime.utcnow().isoformat()
    }), 200


@health_bp.route('/health', methods=['GET'])
def readiness_check():
    """Readiness check - includes database connection"""
    ok = _database_ok()
    return jsonify({
        'status': 'healthy' if ok else 'unhealthy',
        'database': 'connected' if ok else 'disconnected',
        'timestamp': datetime.utcnow().isoformat()
    }), 200 if ok else 503


@health_bp.route('/health/live', methods=['GET'])
def liveness_check():
    """Liveness check for containers"""
    return jsonify({
        'status': 'alive',
        'timestamp': datetime.utcnow().isoformat()
    }), 200
