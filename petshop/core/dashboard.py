"""Dashboard - Aggregate figures computed from the cached entity lists."""

from collections.abc import Sequence
from datetime import datetime, timedelta
from decimal import Decimal

from petshop.contracts.atendimento import Atendimento
from petshop.contracts.catalogo import Produto
from petshop.contracts.clientes import Cliente, Pet
from petshop.contracts.dashboard import DashboardSummary
from petshop.contracts.funcionario import Funcionario

CENTS = Decimal("0.01")
RECENT_WINDOW = timedelta(days=30)


def build_summary(
    clientes: Sequence[Cliente],
    pets: Sequence[Pet],
    funcionarios: Sequence[Funcionario],
    atendimentos: Sequence[Atendimento],
    produtos: Sequence[Produto],
    now: datetime,
    low_stock_threshold: int = 10,
) -> DashboardSummary:
    """Calcula os números do painel.

    Args:
        clientes: Clientes cadastrados.
        pets: Pets cadastrados.
        funcionarios: Funcionários cadastrados.
        atendimentos: Todos os atendimentos.
        produtos: Produtos do catálogo.
        now: Momento de referência para "últimos 30 dias".
        low_stock_threshold: Estoque abaixo deste valor entra no alerta.

    Returns:
        DashboardSummary com contagens, faturamento e ticket médio.
    """
    cutoff = now - RECENT_WINDOW

    def _aware(moment: datetime) -> datetime:
        # Datas sem fuso são tratadas no mesmo fuso de ``now``
        return moment.replace(tzinfo=now.tzinfo) if moment.tzinfo is None else moment

    recentes = [a for a in atendimentos if _aware(a.data) > cutoff]
    faturamento = sum((a.valor_total for a in atendimentos), Decimal("0"))
    ticket = faturamento / len(atendimentos) if atendimentos else Decimal("0")

    return DashboardSummary(
        total_clientes=len(clientes),
        total_pets=len(pets),
        total_funcionarios=len(funcionarios),
        atendimentos_recentes=len(recentes),
        faturamento_total=faturamento.quantize(CENTS),
        ticket_medio=ticket.quantize(CENTS),
        produtos_baixo_estoque=[p for p in produtos if p.estoque < low_stock_threshold],
    )
