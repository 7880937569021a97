"""Unit Tests - Visit ledger (items, stock and totals)."""

from decimal import Decimal

import pytest

from petshop.contracts.atendimento import (
    AtendimentoCreate,
    AtendimentoUpdate,
    ItemAtendimento,
    ItemAtendimentoCreate,
    Status,
    TipoItem,
)
from petshop.core.errors import (
    InsufficientStockError,
    InvalidInputError,
    NotFoundError,
    ReferenceNotFoundError,
    StoreError,
)
from petshop.core.ledger import calculate_total
from petshop.services.supabase import Table


@pytest.fixture
async def visit(deps, seeded):
    return await deps.ledger.create_visit(
        AtendimentoCreate(
            data="2026-02-15T10:00:00",
            cliente_id=seeded["maria"].id,
            pet_id=seeded["rex"].id,
            funcionario_id=seeded["ana"].id,
            observacoes="Primeira visita",
        )
    )


def servico(item_id: str, quantidade: int = 1) -> ItemAtendimentoCreate:
    return ItemAtendimentoCreate(tipo=TipoItem.SERVICO, item_id=item_id, quantidade=quantidade)


def produto(item_id: str, quantidade: int = 1) -> ItemAtendimentoCreate:
    return ItemAtendimentoCreate(tipo=TipoItem.PRODUTO, item_id=item_id, quantidade=quantidade)


class TestVisitLedger:
    """Tests for VisitLedger."""

    @pytest.mark.asyncio
    async def test_maria_rex_end_to_end(self, deps, seeded, visit) -> None:
        """Banho 70 + Ração 120 = 190; removing the ration restores stock and total."""
        banho, racao = seeded["banho"], seeded["racao"]

        assert visit.valor_total == Decimal("0")
        assert visit.itens == []
        assert visit.cliente_nome == "Maria Silva"
        assert visit.pet_nome == "Rex"

        after_service = await deps.ledger.add_item(visit.id, servico(banho.id))
        assert after_service.valor_total == Decimal("70.00")

        after_product = await deps.ledger.add_item(visit.id, produto(racao.id))
        assert after_product.valor_total == Decimal("190.00")
        assert (await deps.products.get(racao.id, fresh=True)).estoque == 49

        racao_item = next(i for i in after_product.itens if i.tipo == TipoItem.PRODUTO)
        assert racao_item.nome == "Ração Premium"

        after_removal = await deps.ledger.remove_item(visit.id, racao_item.id)
        assert after_removal.valor_total == Decimal("70.00")
        assert (await deps.products.get(racao.id, fresh=True)).estoque == 50

    @pytest.mark.asyncio
    async def test_total_is_persisted(self, deps, seeded, visit, store) -> None:
        await deps.ledger.add_item(visit.id, servico(seeded["banho"].id, quantidade=2))

        assert Decimal(store.tables[Table.ATENDIMENTOS][visit.id]["valor_total"]) == Decimal("140.00")

    @pytest.mark.asyncio
    async def test_unit_price_is_frozen(self, deps, seeded, visit) -> None:
        banho = seeded["banho"]
        await deps.ledger.add_item(visit.id, servico(banho.id))

        await deps.services.update(banho.id, {"preco": "99.90"})
        refreshed = await deps.ledger.get_visit(visit.id)

        assert refreshed.itens[0].valor_unitario == Decimal("70.00")
        assert refreshed.valor_total == Decimal("70.00")

    @pytest.mark.asyncio
    async def test_insufficient_stock_rejected_without_changes(
        self, deps, seeded, visit, store
    ) -> None:
        racao = seeded["racao"]

        with pytest.raises(InsufficientStockError):
            await deps.ledger.add_item(visit.id, produto(racao.id, quantidade=51))

        assert (await deps.products.get(racao.id, fresh=True)).estoque == 50
        assert store.tables[Table.ITENS_ATENDIMENTO] == {}

    @pytest.mark.asyncio
    async def test_quantity_below_one_rejected(self, deps, seeded, visit) -> None:
        with pytest.raises(InvalidInputError):
            await deps.ledger.add_item(visit.id, servico(seeded["banho"].id, quantidade=0))

    @pytest.mark.asyncio
    async def test_unknown_visit(self, deps, seeded) -> None:
        with pytest.raises(NotFoundError):
            await deps.ledger.add_item("nao-existe", servico(seeded["banho"].id))

    @pytest.mark.asyncio
    async def test_unknown_product(self, deps, visit) -> None:
        with pytest.raises(ReferenceNotFoundError):
            await deps.ledger.add_item(visit.id, produto("nao-existe"))

    @pytest.mark.asyncio
    async def test_failed_item_insert_restores_stock(self, deps, seeded, visit, store) -> None:
        racao = seeded["racao"]
        store.fail_inserts.add(Table.ITENS_ATENDIMENTO)

        with pytest.raises(StoreError):
            await deps.ledger.add_item(visit.id, produto(racao.id, quantidade=3))

        assert (await deps.products.get(racao.id, fresh=True)).estoque == 50

    @pytest.mark.asyncio
    async def test_remove_item_of_other_visit(self, deps, seeded, visit) -> None:
        other = await deps.ledger.create_visit(
            AtendimentoCreate(
                data="2026-02-16T10:00:00",
                cliente_id=seeded["maria"].id,
                pet_id=seeded["rex"].id,
                funcionario_id=seeded["ana"].id,
            )
        )
        with_item = await deps.ledger.add_item(other.id, servico(seeded["banho"].id))

        with pytest.raises(NotFoundError):
            await deps.ledger.remove_item(visit.id, with_item.itens[0].id)

    @pytest.mark.asyncio
    async def test_total_matches_recomputation_after_sequence(self, deps, seeded, visit) -> None:
        banho, racao = seeded["banho"], seeded["racao"]

        await deps.ledger.add_item(visit.id, servico(banho.id, 2))
        current = await deps.ledger.add_item(visit.id, produto(racao.id, 3))
        first_product = next(i for i in current.itens if i.tipo == TipoItem.PRODUTO)
        await deps.ledger.add_item(visit.id, produto(racao.id, 1))
        final = await deps.ledger.remove_item(visit.id, first_product.id)

        assert final.valor_total == calculate_total(final.itens)
        assert final.valor_total == Decimal("260.00")
        assert (await deps.products.get(racao.id, fresh=True)).estoque == 49

    @pytest.mark.asyncio
    async def test_update_never_touches_total(self, deps, seeded, visit) -> None:
        await deps.ledger.add_item(visit.id, servico(seeded["banho"].id))

        updated = await deps.ledger.update_visit(
            visit.id, AtendimentoUpdate(status=Status.CONCLUIDO, observacoes="Tudo certo")
        )

        assert updated.status == Status.CONCLUIDO
        assert updated.observacoes == "Tudo certo"
        assert updated.valor_total == Decimal("70.00")

    @pytest.mark.asyncio
    async def test_update_with_unknown_reference(self, deps, visit) -> None:
        with pytest.raises(ReferenceNotFoundError):
            await deps.ledger.update_visit(visit.id, AtendimentoUpdate(pet_id="fantasma"))

    @pytest.mark.asyncio
    async def test_enforced_transitions(self, deps, visit) -> None:
        deps.ledger.enforce_status_transitions = True
        await deps.ledger.update_visit(visit.id, AtendimentoUpdate(status=Status.CANCELADO))

        with pytest.raises(InvalidInputError):
            await deps.ledger.update_visit(visit.id, AtendimentoUpdate(status=Status.AGENDADO))

    @pytest.mark.asyncio
    async def test_delete_visit_restores_stock(self, deps, seeded, visit, store) -> None:
        racao = seeded["racao"]
        await deps.ledger.add_item(visit.id, produto(racao.id, 4))

        await deps.ledger.delete_visit(visit.id)

        assert (await deps.products.get(racao.id, fresh=True)).estoque == 50
        assert store.tables[Table.ATENDIMENTOS] == {}
        assert store.tables[Table.ITENS_ATENDIMENTO] == {}

    @pytest.mark.asyncio
    async def test_create_visit_with_unknown_client(self, deps, seeded, store) -> None:
        with pytest.raises(ReferenceNotFoundError):
            await deps.ledger.create_visit(
                AtendimentoCreate(
                    data="2026-02-15T10:00:00",
                    cliente_id="fantasma",
                    pet_id=seeded["rex"].id,
                    funcionario_id=seeded["ana"].id,
                )
            )

        assert store.tables[Table.ATENDIMENTOS] == {}


class TestCalculateTotal:
    def test_sums_quantity_times_unit_price(self) -> None:
        items = [
            ItemAtendimento(id="1", tipo="servico", item_id="s", quantidade=2, valor_unitario="35.50"),
            ItemAtendimento(id="2", tipo="produto", item_id="p", quantidade=1, valor_unitario="0.10"),
        ]

        assert calculate_total(items) == Decimal("71.10")

    def test_empty(self) -> None:
        assert calculate_total([]) == Decimal("0.00")


class TestRemoveItemFailures:
    @pytest.mark.asyncio
    async def test_failed_delete_keeps_stock_and_retry_restores_once(
        self, deps, seeded, visit, store
    ) -> None:
        racao = seeded["racao"]
        current = await deps.ledger.add_item(visit.id, produto(racao.id, 5))
        item_id = current.itens[0].id
        assert (await deps.products.get(racao.id, fresh=True)).estoque == 45

        store.fail_deletes.add(Table.ITENS_ATENDIMENTO)
        with pytest.raises(StoreError):
            await deps.ledger.remove_item(visit.id, item_id)

        assert (await deps.products.get(racao.id, fresh=True)).estoque == 45
        assert item_id in store.tables[Table.ITENS_ATENDIMENTO]

        store.fail_deletes.clear()
        final = await deps.ledger.remove_item(visit.id, item_id)

        assert final.itens == []
        assert (await deps.products.get(racao.id, fresh=True)).estoque == 50

    @pytest.mark.asyncio
    async def test_item_already_gone_does_not_restore_stock(
        self, deps, seeded, visit, store, monkeypatch
    ) -> None:
        racao = seeded["racao"]
        current = await deps.ledger.add_item(visit.id, produto(racao.id, 2))
        item_id = current.itens[0].id

        # Outra requisição removeu o item entre a leitura e a exclusão
        async def already_deleted(table, record_id):
            store.tables[table].pop(record_id, None)
            return False

        monkeypatch.setattr(store, "delete", already_deleted)

        with pytest.raises(NotFoundError):
            await deps.ledger.remove_item(visit.id, item_id)

        assert (await deps.products.get(racao.id, fresh=True)).estoque == 48
