"""Dashboard Contract - Summary figures for the console home page."""

from decimal import Decimal

from pydantic import BaseModel, Field

from petshop.contracts.catalogo import Produto


class DashboardSummary(BaseModel):
    """Resumo geral do pet shop."""

    total_clientes: int = 0
    total_pets: int = 0
    total_funcionarios: int = 0
    atendimentos_recentes: int = Field(0, description="Atendimentos nos últimos 30 dias")
    faturamento_total: Decimal = Decimal("0.00")
    ticket_medio: Decimal = Decimal("0.00")
    produtos_baixo_estoque: list[Produto] = Field(default_factory=list)
