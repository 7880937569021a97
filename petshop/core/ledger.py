"""Visit Ledger - Line items, stock movements and the derived visit total.

``valor_total`` of a visit is never adjusted incrementally: after every
change to the item set it is recomputed from the items stored for the
visit and written back. A failed write therefore leaves, at worst, a total
that the next recomputation corrects.
"""

from collections.abc import Iterable
from decimal import Decimal

from petshop.contracts.atendimento import (
    Atendimento,
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
)
from petshop.core.repository import (
    ClientRepository,
    EmployeeRepository,
    PetRepository,
    ProductRepository,
    ServiceRepository,
)
from petshop.core.status import check_transition
from petshop.services.supabase import Row, SupabaseService, Table
from petshop.utils.logger import get_logger

logger = get_logger(__name__)

CENTS = Decimal("0.01")


def calculate_total(items: Iterable[ItemAtendimento]) -> Decimal:
    """Soma quantidade x valor unitário de todos os itens."""
    total = sum((item.subtotal for item in items), Decimal("0"))
    return total.quantize(CENTS)


class VisitLedger:
    """Mantém itens, estoque e valor total dos atendimentos consistentes."""

    def __init__(
        self,
        store: SupabaseService,
        clients: ClientRepository,
        pets: PetRepository,
        employees: EmployeeRepository,
        services: ServiceRepository,
        products: ProductRepository,
        enforce_status_transitions: bool = False,
    ) -> None:
        self.store = store
        self.clients = clients
        self.pets = pets
        self.employees = employees
        self.services = services
        self.products = products
        self.enforce_status_transitions = enforce_status_transitions

    # Leitura

    async def _item_name(self, tipo: TipoItem, item_id: str) -> str:
        repo = self.products if tipo == TipoItem.PRODUTO else self.services
        source = await repo.get(item_id)
        return source.nome if source else ""

    async def _load_items(self, visit_id: str) -> list[ItemAtendimento]:
        rows = await self.store.fetch_all(
            Table.ITENS_ATENDIMENTO, filters={"atendimento_id": visit_id}
        )
        items = []
        for row in rows:
            item = ItemAtendimento.model_validate(row)
            item.nome = await self._item_name(item.tipo, item.item_id)
            items.append(item)
        return items

    async def _to_visit(self, row: Row, items: list[ItemAtendimento] | None = None) -> Atendimento:
        cliente = await self.clients.get(row["cliente_id"])
        pet = await self.pets.get(row["pet_id"])
        funcionario = await self.employees.get(row["funcionario_id"])
        return Atendimento.model_validate(
            {
                **row,
                "cliente_nome": cliente.nome if cliente else None,
                "pet_nome": pet.nome if pet else None,
                "funcionario_nome": funcionario.nome if funcionario else None,
                "itens": items or [],
            }
        )

    async def _require_visit_row(self, visit_id: str) -> Row:
        row = await self.store.get(Table.ATENDIMENTOS, visit_id)
        if row is None:
            raise NotFoundError("Atendimento não encontrado.")
        return row

    async def list_visits(self) -> list[Atendimento]:
        """Lista atendimentos, mais recentes primeiro (sem carregar itens)."""
        rows = await self.store.fetch_all(
            Table.ATENDIMENTOS, order_by="data", descending=True
        )
        return [await self._to_visit(row) for row in rows]

    async def get_visit(self, visit_id: str) -> Atendimento:
        row = await self._require_visit_row(visit_id)
        return await self._to_visit(row, await self._load_items(visit_id))

    # Cabeçalho do atendimento

    async def _check_references(
        self,
        cliente_id: str | None = None,
        pet_id: str | None = None,
        funcionario_id: str | None = None,
    ) -> None:
        missing = []
        if cliente_id and await self.clients.get(cliente_id) is None:
            missing.append("cliente")
        if pet_id and await self.pets.get(pet_id) is None:
            missing.append("pet")
        if funcionario_id and await self.employees.get(funcionario_id) is None:
            missing.append("funcionário")
        if missing:
            raise ReferenceNotFoundError(
                f"Não encontrado: {', '.join(missing)}."
            )

    async def create_visit(self, data: AtendimentoCreate) -> Atendimento:
        """Abre um atendimento sem itens (valor total zero)."""
        await self._check_references(data.cliente_id, data.pet_id, data.funcionario_id)

        fields = data.model_dump(mode="json")
        fields["valor_total"] = "0.00"
        row = await self.store.insert(Table.ATENDIMENTOS, fields)

        logger.info(
            "visit_created",
            atendimento_id=row["id"],
            cliente_id=data.cliente_id,
            pet_id=data.pet_id,
        )
        return await self._to_visit(row)

    async def update_visit(self, visit_id: str, data: AtendimentoUpdate) -> Atendimento:
        """Atualiza os dados do cabeçalho. Itens e total não passam por aqui."""
        current = await self._require_visit_row(visit_id)
        fields = data.model_dump(mode="json", exclude_unset=True, exclude_none=True)

        await self._check_references(
            fields.get("cliente_id"), fields.get("pet_id"), fields.get("funcionario_id")
        )
        if "status" in fields:
            check_transition(
                Status(current["status"]),
                Status(fields["status"]),
                self.enforce_status_transitions,
            )

        if fields:
            await self.store.update(Table.ATENDIMENTOS, visit_id, fields)
            logger.info("visit_updated", atendimento_id=visit_id, fields=sorted(fields))

        return await self.get_visit(visit_id)

    async def delete_visit(self, visit_id: str) -> None:
        """Remove o atendimento devolvendo ao estoque os produtos lançados."""
        visit = await self.get_visit(visit_id)
        for item in visit.itens:
            await self.remove_item(visit_id, item.id)

        await self.store.delete(Table.ATENDIMENTOS, visit_id)
        logger.info("visit_deleted", atendimento_id=visit_id)

    # Itens

    async def recompute_total(self, visit_id: str) -> Decimal:
        """Recalcula o total a partir dos itens gravados e persiste."""
        items = await self._load_items(visit_id)
        total = calculate_total(items)
        await self.store.update(Table.ATENDIMENTOS, visit_id, {"valor_total": str(total)})

        logger.info(
            "visit_total_recomputed",
            atendimento_id=visit_id,
            itens=len(items),
            valor_total=str(total),
        )
        return total

    async def add_item(self, visit_id: str, data: ItemAtendimentoCreate) -> Atendimento:
        """Lança um produto ou serviço no atendimento.

        Produtos têm o estoque baixado antes do lançamento; o preço atual do
        produto/serviço é copiado como valor unitário.

        Raises:
            InvalidInputError: Quantidade menor que 1.
            NotFoundError: Atendimento inexistente.
            ReferenceNotFoundError: Produto ou serviço inexistente.
            InsufficientStockError: Estoque menor que a quantidade.
        """
        if data.quantidade < 1:
            raise InvalidInputError("A quantidade deve ser no mínimo 1.")

        await self._require_visit_row(visit_id)

        if data.tipo == TipoItem.PRODUTO:
            produto = await self.products.get(data.item_id, fresh=True)
            if produto is None:
                raise ReferenceNotFoundError("Produto não encontrado.")
            if produto.estoque < data.quantidade:
                raise InsufficientStockError(produto.nome, produto.estoque, data.quantidade)

            produto = await self.products.adjust_stock(data.item_id, -data.quantidade)
            valor_unitario = produto.preco
        else:
            servico = await self.services.get(data.item_id, fresh=True)
            if servico is None:
                raise ReferenceNotFoundError("Serviço não encontrado.")
            valor_unitario = servico.preco

        item_fields = {
            "atendimento_id": visit_id,
            "tipo": data.tipo.value,
            "item_id": data.item_id,
            "quantidade": data.quantidade,
            "valor_unitario": str(valor_unitario),
        }
        try:
            row = await self.store.insert(Table.ITENS_ATENDIMENTO, item_fields)
        except Exception:
            if data.tipo == TipoItem.PRODUTO:
                await self.products.adjust_stock(data.item_id, data.quantidade)
                logger.warning(
                    "visit_item_insert_failed_stock_restored",
                    atendimento_id=visit_id,
                    produto_id=data.item_id,
                )
            raise

        logger.info(
            "visit_item_added",
            atendimento_id=visit_id,
            item_row_id=row["id"],
            tipo=data.tipo.value,
            quantidade=data.quantidade,
            valor_unitario=str(valor_unitario),
        )

        await self.recompute_total(visit_id)
        return await self.get_visit(visit_id)

    async def remove_item(self, visit_id: str, item_row_id: str) -> Atendimento:
        """Remove um item; produtos voltam ao estoque."""
        await self._require_visit_row(visit_id)

        row = await self.store.get(Table.ITENS_ATENDIMENTO, item_row_id)
        if row is None or row["atendimento_id"] != visit_id:
            raise NotFoundError("Item não encontrado.")
        item = ItemAtendimento.model_validate(row)

        # Estoque só volta depois que o item saiu; se a exclusão falhar nada muda
        if not await self.store.delete(Table.ITENS_ATENDIMENTO, item_row_id):
            raise NotFoundError("Item não encontrado.")

        if item.tipo == TipoItem.PRODUTO:
            try:
                await self.products.adjust_stock(item.item_id, item.quantidade)
            except ReferenceNotFoundError:
                logger.warning(
                    "visit_item_product_missing",
                    atendimento_id=visit_id,
                    produto_id=item.item_id,
                )

        logger.info(
            "visit_item_removed",
            atendimento_id=visit_id,
            item_row_id=item_row_id,
            tipo=item.tipo.value,
            quantidade=item.quantidade,
        )

        await self.recompute_total(visit_id)
        return await self.get_visit(visit_id)
