"""Client Contract - Models for clients (tutores) and their pets."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def format_cpf(value: str) -> str:
    """Aceita CPF formatado ou não; exige 11 dígitos e devolve 000.000.000-00."""
    digits = "".join(c for c in value if c.isdigit())
    if len(digits) != 11:
        raise ValueError("CPF deve conter 11 dígitos")
    return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"


class Sexo(str, Enum):
    """Sexo do animal."""

    MACHO = "M"
    FEMEA = "F"


class ClienteCreate(BaseModel):
    """Schema para cadastro de cliente."""

    nome: str = Field(..., min_length=1, max_length=200, description="Nome completo")
    email: EmailStr = Field(..., description="Email de contato")
    telefone: str = Field(..., min_length=8, max_length=20, description="Telefone")
    endereco: str = Field("", max_length=300, description="Endereço")
    cpf: str = Field(..., description="CPF (apenas dígitos ou formatado)")

    @field_validator("nome", "telefone", "endereco")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()

    @field_validator("cpf")
    @classmethod
    def validate_cpf(cls, v: str) -> str:
        return format_cpf(v)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "nome": "Maria Silva",
                "email": "maria@email.com",
                "telefone": "(11) 99999-8888",
                "endereco": "Av. Paulista, 1000",
                "cpf": "123.456.789-00",
            }
        }
    )


class ClienteUpdate(BaseModel):
    """Atualização parcial de cliente."""

    nome: str | None = Field(None, min_length=1, max_length=200)
    email: EmailStr | None = None
    telefone: str | None = Field(None, min_length=8, max_length=20)
    endereco: str | None = Field(None, max_length=300)
    cpf: str | None = None

    @field_validator("cpf")
    @classmethod
    def validate_cpf(cls, v: str | None) -> str | None:
        if v is None:
            return v
        return format_cpf(v)


class Cliente(BaseModel):
    """Cliente (leitura do DB)."""

    id: str
    nome: str
    email: str
    telefone: str
    endereco: str = ""
    cpf: str
    data_cadastro: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PetCreate(BaseModel):
    """Schema para cadastro de pet."""

    nome: str = Field(..., min_length=1, max_length=100)
    especie: str = Field(..., min_length=1, max_length=50, description="Cachorro, Gato...")
    raca: str = Field("", max_length=100)
    data_nascimento: date | None = None
    peso: Decimal | None = Field(None, gt=0, description="Peso em kg")
    sexo: Sexo
    cliente_id: str = Field(..., min_length=1, description="ID do tutor")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "nome": "Rex",
                "especie": "Cachorro",
                "raca": "Labrador",
                "data_nascimento": "2020-05-15",
                "peso": 25.5,
                "sexo": "M",
                "cliente_id": "c1",
            }
        }
    )


class PetUpdate(BaseModel):
    """Atualização parcial de pet."""

    nome: str | None = Field(None, min_length=1, max_length=100)
    especie: str | None = Field(None, min_length=1, max_length=50)
    raca: str | None = Field(None, max_length=100)
    data_nascimento: date | None = None
    peso: Decimal | None = Field(None, gt=0)
    sexo: Sexo | None = None
    cliente_id: str | None = Field(None, min_length=1)


class Pet(BaseModel):
    """Pet (leitura do DB) com o nome do tutor projetado."""

    id: str
    nome: str
    especie: str
    raca: str = ""
    data_nascimento: date | None = None
    peso: Decimal | None = None
    sexo: Sexo
    cliente_id: str
    cliente_nome: str | None = Field(None, description="Campo para exibição")

    model_config = ConfigDict(from_attributes=True)
