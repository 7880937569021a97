"""Auth Contract - Login, first-time setup and session payloads."""

from pydantic import BaseModel, EmailStr, Field, field_validator

from petshop.contracts.funcionario import Funcionario, check_password_length


class LoginRequest(BaseModel):
    email: EmailStr
    senha: str = Field(..., min_length=1)


class SetupRequest(BaseModel):
    """Cadastro do primeiro administrador (apenas com o banco vazio)."""

    nome: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    senha: str = Field(..., min_length=6, max_length=72)

    @field_validator("senha")
    @classmethod
    def validate_senha(cls, v: str) -> str:
        return check_password_length(v)


class PasswordChange(BaseModel):
    senha_atual: str = Field(..., min_length=1)
    nova_senha: str = Field(..., min_length=6, max_length=72)

    @field_validator("nova_senha")
    @classmethod
    def validate_nova_senha(cls, v: str) -> str:
        return check_password_length(v)


class SessionResponse(BaseModel):
    token: str
    usuario: Funcionario
