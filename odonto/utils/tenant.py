"""
Tenant scoping. Every tenant-owned row is reached through a TenantScope built
from the authenticated account; handlers never filter by owner themselves.
"""
from functools import wraps
from flask import jsonify, g
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity

from odonto.extensions import db


class TenantScope:
    """Data access bound to one account id."""

    def __init__(self, dentista_id, dentista=None):
        if dentista_id is None:
            raise ValueError("TenantScope requires an account id")
        self.dentista_id = int(dentista_id)
        self.dentista = dentista

    def query(self, model):
        """Base query for ``model`` restricted to this account's rows."""
        return model.query.filter(model.dentista_id == self.dentista_id)

    def get(self, model, record_id):
        """Row by id, or None when missing or owned by another account."""
        if record_id is None:
            return None
        return self.query(model).filter(model.id == record_id).first()

    def add(self, record):
        """Stamp ownership and stage the record in the session."""
        record.dentista_id = self.dentista_id
        db.session.add(record)
        return record

    def __repr__(self):
        return f"<TenantScope dentista={self.dentista_id}>"


def tenant_required(f):
    """
    Require a valid bearer token and hand the route a TenantScope.
    Usage:
        @bp.route('')
        @tenant_required
        def list_things(tenant): ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        verify_jwt_in_request()

        # Local import avoids a models <-> utils cycle at import time
        from odonto.models import Dentista

        try:
            dentista_id = int(get_jwt_identity())
        except (TypeError, ValueError):
            return jsonify({
                'success': False,
                'erro': 'Token inválido'
            }), 403

        dentista = Dentista.query.filter_by(id=dentista_id).first()
        if not dentista:
            return jsonify({
                'success': False,
                'erro': 'Usuário não encontrado'
            }), 401

        if not dentista.ativo:
            return jsonify({
                'success': False,
                'erro': 'Conta desativada'
            }), 403

        g.tenant = TenantScope(dentista.id, dentista=dentista)
        return f(*args, tenant=g.tenant, **kwargs)
    return decorated_function
