"""Serviço do Supabase - Operações de Banco de Dados."""

from enum import Enum
from typing import Any

from petshop.config.settings import get_settings
from petshop.core.errors import StoreError
from petshop.utils.logger import get_logger
from supabase import Client, create_client

logger = get_logger(__name__)

Row = dict[str, Any]


class Table(str, Enum):
    """Tabelas do banco usadas pela aplicação."""

    CLIENTES = "clientes"
    PETS = "pets"
    FUNCIONARIOS = "funcionarios"
    SERVICOS = "servicos"
    PRODUTOS = "produtos"
    ATENDIMENTOS = "atendimentos"
    ITENS_ATENDIMENTO = "itens_atendimento"
    HORARIOS_DISPONIVEIS = "horarios_disponiveis"
    AGENDAMENTOS = "agendamentos"
    LEMBRETES_EMAIL = "lembretes_email"


def _apply_filters(query: Any, filters: dict[str, Any] | None) -> Any:
    """Aplica filtros de igualdade; ``None`` vira ``IS NULL``."""
    for column, value in (filters or {}).items():
        if value is None:
            query = query.is_(column, "null")
        else:
            query = query.eq(column, value)
    return query


class SupabaseService:
    """Serviço encapsulado para operações no Supabase.

    Expõe um contrato genérico (buscar, inserir, atualizar, excluir) sobre as
    tabelas nomeadas em ``Table``. Toda falha do PostgREST vira ``StoreError``.
    """

    def __init__(self, client: Client | None = None) -> None:
        """Inicializa o serviço com um cliente Supabase.

        Args:
            client: Cliente Supabase opcional. Se não fornecido, cria um novo baseado nas settings.
        """
        if client:
            self.client = client
        else:
            self.client = self._create_client()

    def _create_client(self) -> Client:
        """Cria um novo cliente Supabase a partir das configurações."""
        settings = get_settings()

        # Service key ignora RLS; a chave anon serve para desenvolvimento
        key = settings.supabase_service_key or settings.supabase_key

        if not key or not settings.supabase_url:
            if not settings.is_development:
                raise ValueError("Credenciais do Supabase são obrigatórias em produção")
            logger.warning(
                "supabase_not_configured",
                message="Credenciais do Supabase não configuradas. Operações de banco falharão.",
            )

        new_client = create_client(settings.supabase_url, key)

        logger.info(
            "supabase_client_created",
            using_service_key=key == settings.supabase_service_key,
            key_preview=key[:5] + "..." if key else "None",
        )
        return new_client

    async def fetch_all(
        self,
        table: Table,
        order_by: str | None = None,
        filters: dict[str, Any] | None = None,
        descending: bool = False,
    ) -> list[Row]:
        """Busca todos os registros de uma tabela.

        Args:
            table: Tabela alvo.
            order_by: Coluna de ordenação opcional.
            filters: Filtros de igualdade (coluna -> valor).
            descending: Ordenação decrescente.

        Returns:
            Lista de registros.
        """
        try:
            query = _apply_filters(self.client.table(table.value).select("*"), filters)
            if order_by:
                query = query.order(order_by, desc=descending)
            result = query.execute()
        except Exception as e:
            logger.error("store_fetch_failed", table=table.value, error=str(e))
            raise StoreError(f"buscar {table.value}", e) from e

        return result.data or []

    async def get(self, table: Table, record_id: str) -> Row | None:
        """Busca um registro pelo ID.

        Returns:
            Registro ou None se não encontrado.
        """
        try:
            result = (
                self.client.table(table.value)
                .select("*")
                .eq("id", record_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(
                "store_get_failed", table=table.value, record_id=record_id, error=str(e)
            )
            raise StoreError(f"buscar {table.value}", e) from e

        if result and result.data:
            return result.data[0]
        return None

    async def insert(self, table: Table, fields: Row) -> Row:
        """Insere um registro e retorna a linha criada."""
        rows = await self.insert_many(table, [fields])
        return rows[0]

    async def insert_many(self, table: Table, rows: list[Row]) -> list[Row]:
        """Insere vários registros em uma única requisição.

        Raises:
            StoreError: Se o banco recusar ou não retornar as linhas criadas.
        """
        if not rows:
            return []
        try:
            result = self.client.table(table.value).insert(rows).execute()
        except Exception as e:
            logger.error("store_insert_failed", table=table.value, error=str(e))
            raise StoreError(f"adicionar {table.value}", e) from e

        if not result or not result.data:
            raise StoreError(
                f"adicionar {table.value}", ValueError("Nenhum dado retornado")
            )

        logger.info("store_inserted", table=table.value, count=len(result.data))
        return result.data

    async def update(
        self,
        table: Table,
        record_id: str,
        fields: Row,
        conditions: dict[str, Any] | None = None,
    ) -> Row | None:
        """Atualiza um registro.

        Args:
            table: Tabela alvo.
            record_id: ID do registro.
            fields: Campos a alterar.
            conditions: Filtros extras; a atualização só acontece se a linha
                ainda satisfizer todos eles (escrita condicional).

        Returns:
            Registro atualizado, ou None se nenhuma linha casou.
        """
        try:
            query = self.client.table(table.value).update(fields).eq("id", record_id)
            result = _apply_filters(query, conditions).execute()
        except Exception as e:
            logger.error(
                "store_update_failed",
                table=table.value,
                record_id=record_id,
                error=str(e),
            )
            raise StoreError(f"atualizar {table.value}", e) from e

        if result and result.data:
            return result.data[0]
        return None

    async def delete(self, table: Table, record_id: str) -> bool:
        """Exclui um registro pelo ID.

        Returns:
            True se alguma linha foi removida.
        """
        try:
            result = self.client.table(table.value).delete().eq("id", record_id).execute()
        except Exception as e:
            logger.error(
                "store_delete_failed",
                table=table.value,
                record_id=record_id,
                error=str(e),
            )
            raise StoreError(f"excluir {table.value}", e) from e

        return bool(result and result.data)

    async def delete_where(self, table: Table, filters: dict[str, Any]) -> int:
        """Exclui todas as linhas que casam com os filtros.

        Returns:
            Quantidade de linhas removidas.
        """
        try:
            query = _apply_filters(self.client.table(table.value).delete(), filters)
            result = query.execute()
        except Exception as e:
            logger.error("store_delete_failed", table=table.value, error=str(e))
            raise StoreError(f"excluir {table.value}", e) from e

        return len(result.data or [])

    async def exists(self, table: Table, filters: dict[str, Any]) -> bool:
        """Verifica se existe ao menos uma linha com os filtros."""
        try:
            query = _apply_filters(self.client.table(table.value).select("id"), filters)
            result = query.limit(1).execute()
        except Exception as e:
            logger.error("store_exists_failed", table=table.value, error=str(e))
            raise StoreError(f"consultar {table.value}", e) from e

        return bool(result and result.data)

    async def count(self, table: Table, filters: dict[str, Any] | None = None) -> int:
        """Conta linhas de uma tabela (com filtros opcionais)."""
        try:
            query = self.client.table(table.value).select("id", count="exact")
            result = _apply_filters(query, filters).execute()
        except Exception as e:
            logger.error("store_count_failed", table=table.value, error=str(e))
            raise StoreError(f"contar {table.value}", e) from e

        return result.count or 0


# Instância global para os scripts; a API usa injeção de dependência
_supabase_service: SupabaseService | None = None


def get_supabase_service() -> SupabaseService:
    """Retorna ou cria instância global do serviço."""
    global _supabase_service
    if _supabase_service is None:
        _supabase_service = SupabaseService()
    return _supabase_service
