"""Appointment Contract - Online bookings and availability slots."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from petshop.contracts.atendimento import Status


def normalize_hora(value: str) -> str:
    """Normaliza ``HH:MM`` ou ``HH:MM:SS`` (coluna time do Postgres) para ``HH:MM``."""
    parts = value.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise ValueError(f"Horário inválido: {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Horário inválido: {value!r}")
    return f"{hours:02d}:{minutes:02d}"


class HorarioDisponivel(BaseModel):
    """Horário disponível de um funcionário em uma data."""

    id: str
    data: date
    hora: str
    funcionario_id: str
    funcionario_nome: str | None = None
    disponivel: bool = True

    @field_validator("hora")
    @classmethod
    def validate_hora(cls, v: str) -> str:
        return normalize_hora(v)

    model_config = ConfigDict(from_attributes=True)


class HorarioCreate(BaseModel):
    """Cadastro de um único horário."""

    data: date
    hora: str
    funcionario_id: str = Field(..., min_length=1)
    disponivel: bool = True

    @field_validator("hora")
    @classmethod
    def validate_hora(cls, v: str) -> str:
        return normalize_hora(v)


class LoteHorarios(BaseModel):
    """Geração de horários em lote: de ``hora_inicio`` até ``hora_fim`` a cada ``intervalo``."""

    funcionario_id: str | None = Field(
        None, description="Obrigatório para gerentes; atendentes publicam a própria agenda"
    )
    data: date
    hora_inicio: str = "09:00"
    hora_fim: str = "18:00"
    intervalo: int = Field(30, description="Intervalo em minutos")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "funcionario_id": "f1",
                "data": "2026-02-15",
                "hora_inicio": "09:00",
                "hora_fim": "12:00",
                "intervalo": 30,
            }
        }
    )


class AgendamentoCreate(BaseModel):
    """Schema para criação de agendamento.

    O funcionário, a data e a hora vêm do horário escolhido (``horario_id``).
    """

    cliente_id: str = Field(..., min_length=1)
    pet_id: str = Field(..., min_length=1)
    servico_id: str = Field(..., min_length=1)
    data: date | None = None
    horario_id: str | None = None
    observacoes: str = Field("", max_length=2000)


class AgendamentoUpdate(BaseModel):
    """Atualização parcial. ``horario_id`` igual a ``"atual"`` mantém o horário."""

    cliente_id: str | None = Field(None, min_length=1)
    pet_id: str | None = Field(None, min_length=1)
    servico_id: str | None = Field(None, min_length=1)
    data: date | None = None
    horario_id: str | None = None
    status: Status | None = None
    observacoes: str | None = Field(None, max_length=2000)


class StatusUpdate(BaseModel):
    status: Status


class Agendamento(BaseModel):
    """Agendamento (leitura do DB) com nomes e preço do serviço projetados."""

    id: str
    data: date
    hora: str
    status: Status = Status.AGENDADO
    cliente_id: str
    cliente_nome: str | None = None
    pet_id: str
    pet_nome: str | None = None
    servico_id: str
    servico_nome: str | None = None
    valor_servico: Decimal | None = None
    funcionario_id: str
    funcionario_nome: str | None = None
    observacoes: str = ""

    @field_validator("hora")
    @classmethod
    def validate_hora(cls, v: str) -> str:
        return normalize_hora(v)

    @field_validator("observacoes", mode="before")
    @classmethod
    def none_as_empty(cls, v: str | None) -> str:
        return v or ""

    model_config = ConfigDict(from_attributes=True)
