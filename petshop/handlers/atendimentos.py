"""Visit Handler - Service visits and their line items."""

from fastapi import APIRouter, Depends

from petshop.contracts.atendimento import (
    Atendimento,
    AtendimentoCreate,
    AtendimentoUpdate,
    ItemAtendimentoCreate,
)
from petshop.core.dependencies import AppDependencies
from petshop.handlers.deps import get_current_user, get_deps

router = APIRouter(
    prefix="/atendimentos",
    tags=["atendimentos"],
    dependencies=[Depends(get_current_user)],
)


@router.get("", response_model=list[Atendimento])
async def list_atendimentos(deps: AppDependencies = Depends(get_deps)) -> list[Atendimento]:
    """Lista atendimentos, mais recentes primeiro (sem itens)."""
    return await deps.ledger.list_visits()


@router.get("/{atendimento_id}", response_model=Atendimento)
async def get_atendimento(
    atendimento_id: str, deps: AppDependencies = Depends(get_deps)
) -> Atendimento:
    return await deps.ledger.get_visit(atendimento_id)


@router.post("", response_model=Atendimento, status_code=201)
async def create_atendimento(
    payload: AtendimentoCreate, deps: AppDependencies = Depends(get_deps)
) -> Atendimento:
    return await deps.ledger.create_visit(payload)


@router.patch("/{atendimento_id}", response_model=Atendimento)
async def update_atendimento(
    atendimento_id: str,
    payload: AtendimentoUpdate,
    deps: AppDependencies = Depends(get_deps),
) -> Atendimento:
    return await deps.ledger.update_visit(atendimento_id, payload)


@router.delete("/{atendimento_id}", status_code=204)
async def delete_atendimento(
    atendimento_id: str, deps: AppDependencies = Depends(get_deps)
) -> None:
    await deps.ledger.delete_visit(atendimento_id)


@router.post("/{atendimento_id}/itens", response_model=Atendimento, status_code=201)
async def add_item(
    atendimento_id: str,
    payload: ItemAtendimentoCreate,
    deps: AppDependencies = Depends(get_deps),
) -> Atendimento:
    """Lança produto ou serviço; devolve o atendimento com o total recalculado."""
    return await deps.ledger.add_item(atendimento_id, payload)


@router.delete("/{atendimento_id}/itens/{item_id}", response_model=Atendimento)
async def remove_item(
    atendimento_id: str, item_id: str, deps: AppDependencies = Depends(get_deps)
) -> Atendimento:
    return await deps.ledger.remove_item(atendimento_id, item_id)
