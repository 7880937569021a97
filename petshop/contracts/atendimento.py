"""Visit Contract - Service visits (atendimentos) and their line items."""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Status(str, Enum):
    """Status compartilhado por atendimentos e agendamentos."""

    AGENDADO = "agendado"
    EM_ANDAMENTO = "em_andamento"
    CONCLUIDO = "concluido"
    CANCELADO = "cancelado"


class TipoItem(str, Enum):
    """Tipo do item lançado no atendimento."""

    PRODUTO = "produto"
    SERVICO = "servico"


class ItemAtendimentoCreate(BaseModel):
    """Schema para lançar um item no atendimento.

    O valor unitário não é informado: é copiado do serviço/produto no momento
    do lançamento.
    """

    tipo: TipoItem
    item_id: str = Field(..., min_length=1, description="ID do produto ou serviço")
    quantidade: int = Field(1, description="Quantidade (mínimo 1)")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"tipo": "produto", "item_id": "prod1", "quantidade": 1}
        }
    )


class ItemAtendimento(BaseModel):
    """Item do atendimento com preço congelado."""

    id: str
    atendimento_id: str | None = None
    tipo: TipoItem
    item_id: str
    quantidade: int
    valor_unitario: Decimal
    nome: str = Field("", description="Campo para exibição")

    @property
    def subtotal(self) -> Decimal:
        return self.valor_unitario * self.quantidade

    model_config = ConfigDict(from_attributes=True)


class AtendimentoCreate(BaseModel):
    """Schema para abertura de atendimento (sempre sem itens)."""

    data: datetime = Field(..., description="Data e hora do atendimento")
    status: Status = Status.AGENDADO
    cliente_id: str = Field(..., min_length=1)
    pet_id: str = Field(..., min_length=1)
    funcionario_id: str = Field(..., min_length=1)
    observacoes: str = Field("", max_length=2000)


class AtendimentoUpdate(BaseModel):
    """Atualização parcial. ``valor_total`` e itens não são editáveis aqui."""

    data: datetime | None = None
    status: Status | None = None
    cliente_id: str | None = Field(None, min_length=1)
    pet_id: str | None = Field(None, min_length=1)
    funcionario_id: str | None = Field(None, min_length=1)
    observacoes: str | None = Field(None, max_length=2000)


class Atendimento(BaseModel):
    """Atendimento (leitura do DB) com nomes projetados e itens."""

    id: str
    data: datetime
    status: Status
    cliente_id: str
    cliente_nome: str | None = None
    pet_id: str
    pet_nome: str | None = None
    funcionario_id: str
    funcionario_nome: str | None = None
    observacoes: str = ""
    valor_total: Decimal = Decimal("0")
    itens: list[ItemAtendimento] = Field(default_factory=list)

    @field_validator("observacoes", mode="before")
    @classmethod
    def none_as_empty(cls, v: str | None) -> str:
        return v or ""

    model_config = ConfigDict(from_attributes=True)
