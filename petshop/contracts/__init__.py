"""Contracts package - Pydantic schemas for data validation."""

from petshop.contracts.agendamento import (
    Agendamento,
    AgendamentoCreate,
    AgendamentoUpdate,
    HorarioDisponivel,
)
from petshop.contracts.atendimento import (
    Atendimento,
    AtendimentoCreate,
    ItemAtendimento,
    Status,
    TipoItem,
)
from petshop.contracts.catalogo import Produto, Servico
from petshop.contracts.clientes import Cliente, Pet
from petshop.contracts.funcionario import Funcionario, Perfil
from petshop.contracts.lembrete import LembreteEmail, StatusLembrete, TipoLembrete

__all__ = [
    "Agendamento",
    "AgendamentoCreate",
    "AgendamentoUpdate",
    "Atendimento",
    "AtendimentoCreate",
    "Cliente",
    "Funcionario",
    "HorarioDisponivel",
    "ItemAtendimento",
    "LembreteEmail",
    "Perfil",
    "Pet",
    "Produto",
    "Servico",
    "Status",
    "StatusLembrete",
    "TipoItem",
    "TipoLembrete",
]
