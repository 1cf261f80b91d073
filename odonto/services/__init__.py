from .confirmation_code import (
    gerar_codigo,
    gerar_codigo_unico,
    normalizar_codigo,
)

from .dashboard import montar_dashboard

__all__ = [
    # Confirmation codes
    "gerar_codigo",
    "gerar_codigo_unico",
    "normalizar_codigo",
    # Dashboard
    "montar_dashboard",
]
