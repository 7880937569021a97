"""Dashboard Handler - Summary figures."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from petshop.contracts.dashboard import DashboardSummary
from petshop.core.dashboard import build_summary
from petshop.core.dependencies import AppDependencies
from petshop.handlers.deps import get_current_user, get_deps

router = APIRouter(
    prefix="/dashboard", tags=["dashboard"], dependencies=[Depends(get_current_user)]
)


@router.get("", response_model=DashboardSummary)
async def get_dashboard(deps: AppDependencies = Depends(get_deps)) -> DashboardSummary:
    return build_summary(
        clientes=await deps.clients.list(),
        pets=await deps.pets.list(),
        funcionarios=await deps.employees.list(),
        atendimentos=await deps.ledger.list_visits(),
        produtos=await deps.products.list(),
        now=datetime.now(timezone.utc),
        low_stock_threshold=deps.settings.low_stock_threshold,
    )
