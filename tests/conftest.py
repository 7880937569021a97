"""Pytest Configuration - Shared fixtures for tests."""

import copy
import os
import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import date
from decimal import Decimal
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

# Set test environment before importing app
os.environ["APP_ENV"] = "development"
os.environ["ENABLE_TRACING"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from petshop.config.settings import Settings  # noqa: E402
from petshop.contracts.catalogo import ProdutoCreate, ServicoCreate  # noqa: E402
from petshop.contracts.clientes import ClienteCreate, PetCreate  # noqa: E402
from petshop.contracts.funcionario import FuncionarioCreate, Perfil  # noqa: E402
from petshop.core.dependencies import AppDependencies, build_dependencies  # noqa: E402
from petshop.core.errors import StoreError  # noqa: E402
from petshop.services.email import LoggingEmailTransport  # noqa: E402
from petshop.services.sessions import SessionManager  # noqa: E402
from petshop.services.supabase import Row, Table  # noqa: E402


class InMemoryStore:
    """Dublê do SupabaseService que guarda as tabelas em dicionários.

    Segue o mesmo contrato: filtros de igualdade (``None`` = IS NULL),
    atualização condicional devolvendo None quando nada casa.
    """

    def __init__(self) -> None:
        self.tables: dict[Table, dict[str, Row]] = {table: {} for table in Table}
        self.fail_inserts: set[Table] = set()
        self.fail_deletes: set[Table] = set()

    @staticmethod
    def _matches(row: Row, filters: dict[str, Any] | None) -> bool:
        for column, value in (filters or {}).items():
            if value is None:
                if row.get(column) is not None:
                    return False
            elif row.get(column) != value:
                return False
        return True

    async def fetch_all(
        self,
        table: Table,
        order_by: str | None = None,
        filters: dict[str, Any] | None = None,
        descending: bool = False,
    ) -> list[Row]:
        rows = [copy.deepcopy(r) for r in self.tables[table].values() if self._matches(r, filters)]
        if order_by:
            rows.sort(key=lambda r: str(r.get(order_by) or ""), reverse=descending)
        return rows

    async def get(self, table: Table, record_id: str) -> Row | None:
        row = self.tables[table].get(record_id)
        return copy.deepcopy(row) if row else None

    async def insert(self, table: Table, fields: Row) -> Row:
        rows = await self.insert_many(table, [fields])
        return rows[0]

    async def insert_many(self, table: Table, rows: list[Row]) -> list[Row]:
        if table in self.fail_inserts:
            raise StoreError(f"adicionar {table.value}", RuntimeError("insert failed"))

        created = []
        for fields in rows:
            row = copy.deepcopy(fields)
            row.setdefault("id", uuid.uuid4().hex)
            self.tables[table][row["id"]] = row
            created.append(copy.deepcopy(row))
        return created

    async def update(
        self,
        table: Table,
        record_id: str,
        fields: Row,
        conditions: dict[str, Any] | None = None,
    ) -> Row | None:
        row = self.tables[table].get(record_id)
        if row is None or not self._matches(row, conditions):
            return None
        row.update(copy.deepcopy(fields))
        return copy.deepcopy(row)

    async def delete(self, table: Table, record_id: str) -> bool:
        if table in self.fail_deletes:
            raise StoreError(f"excluir {table.value}", RuntimeError("delete failed"))
        return self.tables[table].pop(record_id, None) is not None

    async def delete_where(self, table: Table, filters: dict[str, Any]) -> int:
        doomed = [rid for rid, r in self.tables[table].items() if self._matches(r, filters)]
        for rid in doomed:
            del self.tables[table][rid]
        return len(doomed)

    async def exists(self, table: Table, filters: dict[str, Any]) -> bool:
        return any(self._matches(r, filters) for r in self.tables[table].values())

    async def count(self, table: Table, filters: dict[str, Any] | None = None) -> int:
        return sum(1 for r in self.tables[table].values() if self._matches(r, filters))


class FakeRedis:
    """Subconjunto do redis.asyncio usado pelo SessionManager."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.data[key] = value
        self.ttls[key] = ttl

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def delete(self, key: str) -> int:
        return 1 if self.data.pop(key, None) is not None else 0

    async def aclose(self) -> None:
        return None


@pytest.fixture
def settings() -> Settings:
    return Settings(enable_tracing=False, app_env="development")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def transport() -> LoggingEmailTransport:
    return LoggingEmailTransport()


@pytest.fixture
def deps(
    store: InMemoryStore,
    settings: Settings,
    fake_redis: FakeRedis,
    transport: LoggingEmailTransport,
) -> AppDependencies:
    sessions = SessionManager("redis://test", ttl_seconds=60, client=fake_redis)
    return build_dependencies(store, settings, sessions=sessions, transport=transport)  # type: ignore[arg-type]


@pytest.fixture
async def seeded(deps: AppDependencies) -> dict[str, Any]:
    """Maria (cliente), Rex (pet), Ana (gerente), Banho (serviço) e Ração (produto)."""
    maria = await deps.clients.create(
        ClienteCreate(
            nome="Maria Silva",
            email="maria@email.com",
            telefone="(11) 99999-8888",
            endereco="Av. Paulista, 1000",
            cpf="12345678900",
        )
    )
    rex = await deps.pets.create(
        PetCreate(
            nome="Rex",
            especie="Cachorro",
            raca="Labrador",
            peso=Decimal("25.5"),
            sexo="M",
            cliente_id=maria.id,
        )
    )
    ana = await deps.employees.create(
        FuncionarioCreate(
            nome="Ana Souza",
            cargo="Tosadora",
            email="ana@petshop.com",
            email_login="ana@petshop.com",
            senha="segredo123",
            perfil=Perfil.GERENTE,
        )
    )
    banho = await deps.services.create(
        ServicoCreate(nome="Banho", descricao="Banho completo", duracao=60, preco=Decimal("70.00"))
    )
    racao = await deps.products.create(
        ProdutoCreate(
            nome="Ração Premium",
            descricao="Ração para cães adultos",
            preco=Decimal("120.00"),
            estoque=50,
            categoria="Alimentação",
        )
    )
    return {"maria": maria, "rex": rex, "ana": ana, "banho": banho, "racao": racao}


@pytest.fixture
def booking_day() -> date:
    return date(2026, 2, 15)


@pytest.fixture
async def async_client(deps: AppDependencies) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI app."""
    from petshop.main import app

    app.state.deps = deps
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.state.deps = None


@pytest.fixture
def login_as(deps: AppDependencies) -> Callable[[Perfil, str], Awaitable[dict[str, str]]]:
    """Fábrica: cria um funcionário com o perfil e devolve o header de autorização."""

    async def _login(perfil: Perfil, email: str) -> dict[str, str]:
        user = await deps.employees.create(
            FuncionarioCreate(
                nome=f"Usuário {perfil.value}",
                cargo=perfil.value,
                email=email,
                email_login=email,
                senha="senha123",
                perfil=perfil,
            )
        )
        token = await deps.sessions.create(user)
        return {"Authorization": f"Bearer {token}"}

    return _login
