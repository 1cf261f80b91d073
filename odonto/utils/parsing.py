"""Request value parsing shared by the route modules."""
import re
from datetime import datetime
from decimal import Decimal, InvalidOperation

from flask import request

_HORARIO_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


def json_body():
    """Request JSON when it is an object, otherwise None (missing, malformed, list, scalar)."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else None


def campo_nao_texto(data, campos):
    """First key of ``campos`` present in ``data`` holding something other than a string or null."""
    for campo in campos:
        valor = data.get(campo)
        if valor is not None and not isinstance(valor, str):
            return campo
    return None


def validar_id(valor):
    """Positive integer id from a path/body value, or None."""
    if isinstance(valor, bool):
        return None
    try:
        record_id = int(valor)
    except (TypeError, ValueError):
        return None
    return record_id if record_id > 0 else None


def parse_date(date_string):
    """Parse YYYY-MM-DD (or ISO datetime) to a date, None when invalid."""
    if not date_string or not isinstance(date_string, str):
        return None
    try:
        return datetime.strptime(date_string, '%Y-%m-%d').date()
    except ValueError:
        try:
            return datetime.fromisoformat(date_string).date()
        except ValueError:
            return None


def parse_horario(valor):
    """Normalize a time to HH:MM. Accepts HH:MM and HH:MM:SS; None when invalid."""
    if not isinstance(valor, str):
        return None
    valor = valor.strip()[:5]
    return valor if _HORARIO_RE.match(valor) else None


def parse_valor(valor):
    """Money amount as Decimal, None when missing or not a finite number."""
    if valor in (None, '') or isinstance(valor, (bool, list, dict)):
        return None
    try:
        numero = Decimal(str(valor))
        if not numero.is_finite():
            return None
        return numero.quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError):
        return None


def parse_inteiro_positivo(valor):
    """Integer > 0 from a number or numeric string, None otherwise."""
    if isinstance(valor, bool):
        return None
    try:
        numero = int(valor)
    except (TypeError, ValueError):
        return None
    return numero if numero > 0 else None


def parse_bool(valor):
    if isinstance(valor, str):
        return valor.strip().lower() in ('true', '1', 'sim', 'yes', 'on')
    return bool(valor)


def empty_to_none(valor):
    """Blank strings become None; other values pass through."""
    if isinstance(valor, str) and not valor.strip():
        return None
    return valor
