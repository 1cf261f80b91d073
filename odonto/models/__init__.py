from .dentista import Dentista
from .paciente import Paciente
from .profissional import Profissional
from .agendamento import Agendamento
from .prontuario import Prontuario
from .anamnese import Anamnese
from .receita import Receita
from .atestado import Atestado
from .financeiro import Movimentacao
from .nota_fiscal import NotaFiscal
from .fila_encaixe import FilaEncaixe
from .config_clinica import ConfigClinica
from .audit_log import AuditLog

__all__ = [
    "Dentista", "Paciente", "Profissional", "Agendamento", "Prontuario", "Anamnese", "Receita", "Atestado",
    "Movimentacao", "NotaFiscal", "FilaEncaixe", "ConfigClinica", "AuditLog"
]
