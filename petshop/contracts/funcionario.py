"""Employee Contract - Staff records and access profiles."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

# Limite do bcrypt: bytes além do 72º são rejeitados
MAX_PASSWORD_BYTES = 72


def check_password_length(value: str) -> str:
    """Rejeita senhas que o bcrypt não consegue gerar hash (mais de 72 bytes em UTF-8)."""
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Senha deve ter no máximo {MAX_PASSWORD_BYTES} bytes")
    return value


class Perfil(str, Enum):
    """Perfis de acesso, do mais amplo ao mais restrito.

    ``funcionario`` é o valor gravado por cadastros antigos e equivale a
    ``atendente``.
    """

    ADMIN = "admin"
    GERENTE = "gerente"
    ATENDENTE = "atendente"

    @classmethod
    def parse(cls, value: "str | Perfil | None") -> "Perfil":
        if isinstance(value, Perfil):
            return value
        if value in (None, "", "funcionario"):
            return cls.ATENDENTE
        return cls(value)


class FuncionarioCreate(BaseModel):
    """Schema para cadastro de funcionário."""

    nome: str = Field(..., min_length=1, max_length=200)
    cargo: str = Field(..., min_length=1, max_length=80)
    email: EmailStr
    telefone: str = Field("Não informado", max_length=20)
    email_login: EmailStr = Field(..., description="Email usado no login")
    senha: str = Field(..., min_length=6, max_length=72, description="Senha em texto puro")
    perfil: Perfil = Perfil.ATENDENTE
    ativo: bool = True

    @field_validator("senha")
    @classmethod
    def validate_senha(cls, v: str) -> str:
        return check_password_length(v)

    @field_validator("perfil", mode="before")
    @classmethod
    def parse_perfil(cls, v: object) -> Perfil:
        return Perfil.parse(v)  # type: ignore[arg-type]


class FuncionarioUpdate(BaseModel):
    nome: str | None = Field(None, min_length=1, max_length=200)
    cargo: str | None = Field(None, min_length=1, max_length=80)
    email: EmailStr | None = None
    telefone: str | None = Field(None, max_length=20)
    email_login: EmailStr | None = None
    senha: str | None = Field(None, min_length=6, max_length=72)
    perfil: Perfil | None = None
    ativo: bool | None = None

    @field_validator("senha")
    @classmethod
    def validate_senha(cls, v: str | None) -> str | None:
        return v if v is None else check_password_length(v)

    @field_validator("perfil", mode="before")
    @classmethod
    def parse_perfil(cls, v: object) -> Perfil | None:
        if v is None:
            return None
        return Perfil.parse(v)  # type: ignore[arg-type]


class Funcionario(BaseModel):
    """Funcionário (leitura do DB). O hash da senha nunca sai daqui."""

    id: str
    nome: str
    cargo: str
    email: str
    telefone: str = ""
    data_cadastro: datetime | None = None
    email_login: str | None = None
    perfil: Perfil = Perfil.ATENDENTE
    ativo: bool = True

    @field_validator("perfil", mode="before")
    @classmethod
    def parse_perfil(cls, v: object) -> Perfil:
        return Perfil.parse(v)  # type: ignore[arg-type]

    model_config = ConfigDict(from_attributes=True)
