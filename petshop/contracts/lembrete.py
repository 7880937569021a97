"""Reminder Contract - Email reminders attached to appointments."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from petshop.contracts.agendamento import Agendamento
from petshop.contracts.catalogo import Servico
from petshop.contracts.clientes import Cliente, Pet
from petshop.contracts.funcionario import Funcionario


class TipoLembrete(str, Enum):
    CONFIRMACAO = "confirmacao"
    LEMBRETE = "lembrete"


class StatusLembrete(str, Enum):
    PENDENTE = "pendente"
    ENVIADO = "enviado"
    ERRO = "erro"


class AgendamentoDetalhado(BaseModel):
    """Agendamento com as entidades relacionadas completas (para montar o email)."""

    agendamento: Agendamento
    cliente: Cliente | None = None
    pet: Pet | None = None
    funcionario: Funcionario | None = None
    servico: Servico | None = None


class LembreteEmail(BaseModel):
    """Lembrete de email (leitura do DB)."""

    id: str
    agendamento_id: str
    tipo: TipoLembrete
    status: StatusLembrete = StatusLembrete.PENDENTE
    enviado_em: datetime | None = None
    detalhes: AgendamentoDetalhado | None = Field(
        None, description="Carregado apenas na fila de pendentes"
    )

    model_config = ConfigDict(from_attributes=True)


class EmailMessage(BaseModel):
    """Email renderizado, pronto para o transporte."""

    to: str
    subject: str
    body: str


class ReminderFailure(BaseModel):
    lembrete_id: str
    error: str


class ReminderRunResult(BaseModel):
    """Resultado de uma passada pela fila de lembretes."""

    sent: int = 0
    skipped: int = 0
    failed: list[ReminderFailure] = Field(default_factory=list)
