from .tenant import TenantScope, tenant_required

from .audit import log_audit

from .parsing import (
    json_body,
    campo_nao_texto,
    validar_id,
    parse_date,
    parse_horario,
    parse_valor,
    parse_inteiro_positivo,
    parse_bool,
    empty_to_none,
)

__all__ = [
    # Tenant scoping
    "TenantScope",
    "tenant_required",
    # Audit
    "log_audit",
    # Parsing
    "json_body",
    "campo_nao_texto",
    "validar_id",
    "parse_date",
    "parse_horario",
    "parse_valor",
    "parse_inteiro_positivo",
    "parse_bool",
    "empty_to_none",
]
