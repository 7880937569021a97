"""Security helpers - Password hashing and session tokens."""

import secrets

import bcrypt

from petshop.core.errors import InvalidInputError

# bcrypt só considera os primeiros 72 bytes; versões recentes recusam o excesso
BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Gera hash bcrypt (com salt) para a senha.

    Raises:
        InvalidInputError: Senha com mais de 72 bytes em UTF-8.
    """
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise InvalidInputError(f"Senha deve ter no máximo {BCRYPT_MAX_BYTES} bytes.")
    return bcrypt.hashpw(encoded, bcrypt.gensalt()).decode("utf-8")


def is_bcrypt_hash(stored_hash: str | None) -> bool:
    """Hashes bcrypt começam com $2a$, $2b$ ou $2y$."""
    return isinstance(stored_hash, str) and stored_hash.startswith("$2")


def verify_password(password: str, stored_hash: str) -> bool:
    """Confere a senha contra um hash bcrypt."""
    encoded = password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, stored_hash.encode("utf-8"))
    except ValueError:
        # Hash corrompido no banco
        return False


def verify_legacy_password(password: str, stored_value: str) -> bool:
    """Compara com uma senha gravada em texto puro por versões antigas do sistema."""
    return secrets.compare_digest(password.encode("utf-8"), stored_value.encode("utf-8"))


def generate_session_token(length: int = 32) -> str:
    return secrets.token_urlsafe(length)
