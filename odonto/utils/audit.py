"""
Audit trail helper. Called after the business write has committed; a failure
here is logged and never turns a successful request into an error.
"""
import json
import logging

from flask import has_request_context, request

from odonto.extensions import db
from odonto.models import AuditLog

logger = logging.getLogger(__name__)


def _client_ip():
    if not has_request_context():
        return None
    # First hop when behind a proxy
    forwarded = request.headers.get('X-Forwarded-For', '').split(',')[0].strip()
    return forwarded or request.remote_addr


def log_audit(entity_type, action, dentista_id=None, entity_id=None, details=None):
    """Record ``action`` on ``entity_type``/``entity_id`` for the acting account."""
    entry = AuditLog(
        dentista_id=dentista_id,
        entity_type=entity_type,
        entity_id=None if entity_id is None else str(entity_id),
        action=action,
        details=json.dumps(details, default=str, ensure_ascii=False) if details else None,
        ip_address=_client_ip(),
    )
    try:
        db.session.add(entry)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.warning("Audit entry %s/%s for account %s not saved: %s", entity_type, action, dentista_id, e)
