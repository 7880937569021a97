"""Session Manager - Sessões de login dos funcionários no Redis.

Cada login gera um token opaco; o Redis guarda o funcionário autenticado
sob esse token até o TTL expirar ou o logout apagar a chave.
"""

import redis.asyncio as redis

from petshop.contracts.funcionario import Funcionario
from petshop.core.errors import StoreError
from petshop.utils.logger import get_logger
from petshop.utils.security import generate_session_token

logger = get_logger(__name__)

# TTL padrão: um expediente (8 horas)
DEFAULT_SESSION_TTL_SECONDS = 8 * 3600


class SessionManager:
    """Gerencia sessões de login no Redis."""

    def __init__(
        self,
        redis_url: str,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        client: redis.Redis | None = None,
    ) -> None:
        """Inicializa o gerenciador.

        Args:
            redis_url: URL de conexão do Redis.
            ttl_seconds: Validade da sessão.
            client: Cliente Redis já criado (testes).
        """
        self.redis_url = redis_url
        self.ttl_seconds = ttl_seconds
        self._redis = client

    async def _get_redis(self) -> redis.Redis:
        """Obtém conexão Redis (lazy init)."""
        if self._redis is None:
            self._redis = redis.from_url(self.redis_url)
        return self._redis

    def _key(self, token: str) -> str:
        return f"session:{token}"

    async def create(self, user: Funcionario) -> str:
        """Abre uma sessão para o funcionário.

        Returns:
            Token da sessão.

        Raises:
            StoreError: Redis indisponível.
        """
        token = generate_session_token()
        try:
            r = await self._get_redis()
            await r.setex(self._key(token), self.ttl_seconds, user.model_dump_json())
        except Exception as e:
            logger.error("session_create_failed", funcionario_id=user.id, error=str(e))
            raise StoreError("criar sessão", e) from e

        logger.info("session_created", funcionario_id=user.id, perfil=user.perfil.value)
        return token

    async def get(self, token: str) -> Funcionario | None:
        """Funcionário da sessão, ou None se expirada/inexistente."""
        try:
            r = await self._get_redis()
            data = await r.get(self._key(token))
        except Exception as e:
            logger.warning("session_load_failed", error=str(e))
            return None

        if not data:
            return None
        return Funcionario.model_validate_json(data)

    async def delete(self, token: str) -> None:
        """Encerra a sessão (logout)."""
        try:
            r = await self._get_redis()
            await r.delete(self._key(token))
            logger.info("session_deleted")
        except Exception as e:
            logger.warning("session_delete_failed", error=str(e))

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


# Singleton instance
_session_manager: SessionManager | None = None


def get_session_manager() -> SessionManager:
    """Obtém instância singleton do gerenciador.

    Returns:
        SessionManager configurado.
    """
    global _session_manager
    if _session_manager is None:
        from petshop.config.settings import get_settings

        settings = get_settings()
        _session_manager = SessionManager(
            redis_url=settings.redis_url, ttl_seconds=settings.session_ttl_seconds
        )
    return _session_manager
