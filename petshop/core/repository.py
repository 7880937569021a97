"""Entity Repositories - Cached CRUD over the store with delete guards.

Each repository keeps an in-process cache of the rows it has fetched. The
cache is hydrated on the first ``list()`` (or an explicit ``refresh()``)
and patched after every successful write; the store remains the source of
truth.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from petshop.contracts.catalogo import (
    Produto,
    ProdutoCreate,
    ProdutoUpdate,
    Servico,
    ServicoCreate,
    ServicoUpdate,
)
from petshop.contracts.clientes import (
    Cliente,
    ClienteCreate,
    ClienteUpdate,
    Pet,
    PetCreate,
    PetUpdate,
)
from petshop.contracts.funcionario import (
    Funcionario,
    FuncionarioCreate,
    FuncionarioUpdate,
)
from petshop.core.errors import (
    DependentRecordsError,
    DuplicateEmailError,
    InsufficientStockError,
    NotFoundError,
    ReferenceNotFoundError,
    ResourceConflictError,
)
from petshop.services.supabase import Row, SupabaseService, Table
from petshop.utils.logger import get_logger
from petshop.utils.security import hash_password

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Repository(Generic[ModelT]):
    """Repositório genérico com cache.

    Subclasses definem ``table``, ``model`` e ``label`` e podem sobrescrever
    os ganchos ``_project`` (projeção de nomes), ``_prepare_create``,
    ``_prepare_update`` e ``_check_can_delete``.
    """

    table: Table
    model: type[ModelT]
    label: str = "registro"
    order_by: str | None = "nome"

    def __init__(self, store: SupabaseService) -> None:
        self.store = store
        self._cache: dict[str, ModelT] | None = None

    async def _project(self, row: Row) -> Row:
        return row

    async def _to_model(self, row: Row) -> ModelT:
        return self.model.model_validate(await self._project(dict(row)))

    async def _prepare_create(self, fields: Row) -> Row:
        return fields

    async def _prepare_update(self, record_id: str, fields: Row) -> Row:
        return fields

    async def _check_can_delete(self, record_id: str) -> None:
        return None

    def _remember(self, item: ModelT) -> ModelT:
        if self._cache is not None:
            self._cache[item.id] = item  # type: ignore[attr-defined]
        return item

    async def refresh(self) -> list[ModelT]:
        """Descarta o cache e recarrega tudo do banco."""
        rows = await self.store.fetch_all(self.table, order_by=self.order_by)
        items = [await self._to_model(row) for row in rows]
        self._cache = {item.id: item for item in items}  # type: ignore[attr-defined]
        logger.info("repository_refreshed", table=self.table.value, count=len(items))
        return items

    async def list(self) -> list[ModelT]:
        if self._cache is None:
            return await self.refresh()
        return list(self._cache.values())

    async def get(self, record_id: str, fresh: bool = False) -> ModelT | None:
        """Busca pelo ID, no cache ou (se ausente ou ``fresh``) no banco."""
        if not fresh and self._cache is not None and record_id in self._cache:
            return self._cache[record_id]

        row = await self.store.get(self.table, record_id)
        if row is None:
            if self._cache is not None:
                self._cache.pop(record_id, None)
            return None
        return self._remember(await self._to_model(row))

    async def require(self, record_id: str) -> ModelT:
        """Como ``get``, mas levanta ``NotFoundError`` se não existir."""
        item = await self.get(record_id)
        if item is None:
            raise NotFoundError(f"{self.label.capitalize()} não encontrado(a).")
        return item

    async def create(self, data: BaseModel) -> ModelT:
        fields = await self._prepare_create(data.model_dump(mode="json"))
        row = await self.store.insert(self.table, fields)
        item = self._remember(await self._to_model(row))

        logger.info(f"{self.label}_created", record_id=row.get("id"))
        return item

    async def update(self, record_id: str, data: BaseModel | Row) -> ModelT:
        """Atualização parcial: só os campos informados são enviados ao banco."""
        if isinstance(data, BaseModel):
            fields = data.model_dump(mode="json", exclude_unset=True)
        else:
            fields = dict(data)

        if not fields:
            return await self.require(record_id)

        fields = await self._prepare_update(record_id, fields)
        row = await self.store.update(self.table, record_id, fields)
        if row is None:
            raise NotFoundError(f"{self.label.capitalize()} não encontrado(a).")

        item = self._remember(await self._to_model(row))
        logger.info(
            f"{self.label}_updated", record_id=record_id, fields=sorted(fields)
        )
        return item

    async def delete(self, record_id: str) -> None:
        """Exclui após verificar que nenhum registro depende deste."""
        await self.require(record_id)
        await self._check_can_delete(record_id)

        await self.store.delete(self.table, record_id)
        if self._cache is not None:
            self._cache.pop(record_id, None)

        logger.info(f"{self.label}_deleted", record_id=record_id)

    async def _guard(self, table: Table, filters: dict[str, Any], message: str) -> None:
        if await self.store.exists(table, filters):
            logger.warning(
                "delete_blocked",
                table=self.table.value,
                dependent_table=table.value,
                filters=filters,
            )
            raise DependentRecordsError(message)


class ClientRepository(Repository[Cliente]):
    table = Table.CLIENTES
    model = Cliente
    label = "cliente"

    async def create(self, data: ClienteCreate) -> Cliente:  # type: ignore[override]
        return await super().create(data)

    async def update(self, record_id: str, data: ClienteUpdate | Row) -> Cliente:  # type: ignore[override]
        return await super().update(record_id, data)

    async def _check_can_delete(self, record_id: str) -> None:
        await self._guard(
            Table.PETS,
            {"cliente_id": record_id},
            "Este cliente possui pets cadastrados. Remova os pets primeiro.",
        )
        await self._guard(
            Table.ATENDIMENTOS,
            {"cliente_id": record_id},
            "Este cliente possui atendimentos registrados.",
        )
        await self._guard(
            Table.AGENDAMENTOS,
            {"cliente_id": record_id},
            "Este cliente possui agendamentos registrados.",
        )


class PetRepository(Repository[Pet]):
    table = Table.PETS
    model = Pet
    label = "pet"

    def __init__(self, store: SupabaseService, clients: ClientRepository) -> None:
        super().__init__(store)
        self.clients = clients

    async def _project(self, row: Row) -> Row:
        cliente = await self.clients.get(row["cliente_id"])
        row["cliente_nome"] = cliente.nome if cliente else None
        return row

    async def _require_owner(self, cliente_id: str) -> None:
        if await self.clients.get(cliente_id) is None:
            raise ReferenceNotFoundError("Cliente não encontrado.")

    async def _prepare_create(self, fields: Row) -> Row:
        await self._require_owner(fields["cliente_id"])
        return fields

    async def _prepare_update(self, record_id: str, fields: Row) -> Row:
        if fields.get("cliente_id"):
            await self._require_owner(fields["cliente_id"])
        return fields

    async def create(self, data: PetCreate) -> Pet:  # type: ignore[override]
        return await super().create(data)

    async def update(self, record_id: str, data: PetUpdate | Row) -> Pet:  # type: ignore[override]
        return await super().update(record_id, data)

    async def list_by_client(self, cliente_id: str) -> list[Pet]:
        return [pet for pet in await self.list() if pet.cliente_id == cliente_id]

    async def _check_can_delete(self, record_id: str) -> None:
        await self._guard(
            Table.ATENDIMENTOS,
            {"pet_id": record_id},
            "Este pet possui atendimentos registrados.",
        )
        await self._guard(
            Table.AGENDAMENTOS,
            {"pet_id": record_id},
            "Este pet possui agendamentos registrados.",
        )


class EmployeeRepository(Repository[Funcionario]):
    table = Table.FUNCIONARIOS
    model = Funcionario
    label = "funcionario"

    async def _ensure_login_free(self, email_login: str, record_id: str | None = None) -> None:
        rows = await self.store.fetch_all(
            Table.FUNCIONARIOS, filters={"email_login": email_login}
        )
        if any(row["id"] != record_id for row in rows):
            raise DuplicateEmailError("Já existe um funcionário com este email.")

    async def _prepare_create(self, fields: Row) -> Row:
        await self._ensure_login_free(fields["email_login"])
        fields["senha_hash"] = hash_password(fields.pop("senha"))
        return fields

    async def _prepare_update(self, record_id: str, fields: Row) -> Row:
        if fields.get("email_login"):
            await self._ensure_login_free(fields["email_login"], record_id)
        if "senha" in fields:
            senha = fields.pop("senha")
            if senha:
                fields["senha_hash"] = hash_password(senha)
        return fields

    async def create(self, data: FuncionarioCreate) -> Funcionario:  # type: ignore[override]
        return await super().create(data)

    async def update(self, record_id: str, data: FuncionarioUpdate | Row) -> Funcionario:  # type: ignore[override]
        return await super().update(record_id, data)

    async def set_active(self, record_id: str, ativo: bool) -> Funcionario:
        """Ativa ou desativa o acesso do funcionário."""
        return await self.update(record_id, {"ativo": ativo})

    async def _check_can_delete(self, record_id: str) -> None:
        await self._guard(
            Table.ATENDIMENTOS,
            {"funcionario_id": record_id},
            "Este funcionário possui atendimentos registrados.",
        )
        await self._guard(
            Table.AGENDAMENTOS,
            {"funcionario_id": record_id},
            "Este funcionário possui agendamentos registrados.",
        )

    async def delete(self, record_id: str) -> None:
        await super().delete(record_id)
        # Horários ainda abertos deixam de fazer sentido sem o funcionário
        removed = await self.store.delete_where(
            Table.HORARIOS_DISPONIVEIS, {"funcionario_id": record_id}
        )
        if removed:
            logger.info("employee_slots_removed", funcionario_id=record_id, count=removed)


class ServiceRepository(Repository[Servico]):
    table = Table.SERVICOS
    model = Servico
    label = "servico"

    async def create(self, data: ServicoCreate) -> Servico:  # type: ignore[override]
        return await super().create(data)

    async def update(self, record_id: str, data: ServicoUpdate | Row) -> Servico:  # type: ignore[override]
        return await super().update(record_id, data)

    async def _check_can_delete(self, record_id: str) -> None:
        await self._guard(
            Table.ITENS_ATENDIMENTO,
            {"tipo": "servico", "item_id": record_id},
            "Este serviço está sendo usado em atendimentos.",
        )
        await self._guard(
            Table.AGENDAMENTOS,
            {"servico_id": record_id},
            "Este serviço está sendo usado em agendamentos.",
        )


class ProductRepository(Repository[Produto]):
    table = Table.PRODUTOS
    model = Produto
    label = "produto"

    async def create(self, data: ProdutoCreate) -> Produto:  # type: ignore[override]
        return await super().create(data)

    async def update(self, record_id: str, data: ProdutoUpdate | Row) -> Produto:  # type: ignore[override]
        return await super().update(record_id, data)

    async def _check_can_delete(self, record_id: str) -> None:
        await self._guard(
            Table.ITENS_ATENDIMENTO,
            {"tipo": "produto", "item_id": record_id},
            "Este produto está sendo usado em atendimentos.",
        )

    async def adjust_stock(self, record_id: str, delta: int) -> Produto:
        """Soma ``delta`` ao estoque (negativo para baixa).

        A escrita é condicional ao estoque lido, então duas baixas simultâneas
        não se sobrescrevem.

        Raises:
            ReferenceNotFoundError: Produto inexistente.
            InsufficientStockError: O estoque ficaria negativo.
            ResourceConflictError: O estoque mudou entre a leitura e a escrita.
        """
        row = await self.store.get(Table.PRODUTOS, record_id)
        if row is None:
            raise ReferenceNotFoundError("Produto não encontrado.")

        current = int(row["estoque"])
        novo = current + delta
        if novo < 0:
            raise InsufficientStockError(row["nome"], current, -delta)

        updated = await self.store.update(
            Table.PRODUTOS, record_id, {"estoque": novo}, conditions={"estoque": current}
        )
        if updated is None:
            raise ResourceConflictError(
                "O estoque foi alterado por outra operação. Tente novamente."
            )

        logger.info(
            "product_stock_adjusted",
            produto_id=record_id,
            delta=delta,
            estoque=novo,
        )
        return self._remember(await self._to_model(updated))

    async def low_stock(self, threshold: int) -> list[Produto]:
        return [p for p in await self.list() if p.estoque < threshold]
