"""
Confirmation codes for the patient-facing appointment link.

Codes are 6 characters from an alphabet without the look-alikes 0/O and 1/I.
Allocation retries a bounded number of times against existing appointments
and then degrades to an unchecked 8-character code.
"""
import logging
import secrets

logger = logging.getLogger(__name__)

ALFABETO = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
TAMANHO_CODIGO = 6
MAX_TENTATIVAS = 10


def gerar_codigo(tamanho=TAMANHO_CODIGO):
    """Random code, each character drawn uniformly from ALFABETO."""
    return ''.join(secrets.choice(ALFABETO) for _ in range(tamanho))


def codigo_existe(codigo):
    """True when any appointment (of any account) already holds ``codigo``."""
    from odonto.models import Agendamento

    return Agendamento.query.filter_by(codigo_confirmacao=codigo).first() is not None


def gerar_codigo_unico(existe=codigo_existe, tentativas=MAX_TENTATIVAS):
    """
    Allocate a code not yet used by any appointment.

    After ``tentativas`` collisions the result is a fresh code plus the first
    two characters of another fresh code, returned WITHOUT a uniqueness check.
    Two concurrent creations can still race between the check and the insert;
    the unique index on the column is the last line.
    """
    for tentativa in range(tentativas):
        codigo = gerar_codigo()
        if not existe(codigo):
            return codigo
        logger.debug("Confirmation code collision on attempt %d", tentativa + 1)

    codigo = gerar_codigo() + gerar_codigo()[:2]
    logger.warning("Confirmation code allocation fell back to unchecked code after %d collisions", tentativas)
    return codigo


def normalizar_codigo(codigo):
    """Codes are matched case-insensitively; storage is upper-case."""
    return (codigo or '').strip().upper()
