"""Catalog Contract - Services and products offered by the shop."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ServicoCreate(BaseModel):
    """Schema para cadastro de serviço."""

    nome: str = Field(..., min_length=1, max_length=120)
    descricao: str = Field("", max_length=500)
    duracao: int = Field(..., gt=0, description="Duração em minutos")
    preco: Decimal = Field(..., ge=0, decimal_places=2)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "nome": "Banho",
                "descricao": "Banho completo com shampoo especial",
                "duracao": 60,
                "preco": "70.00",
            }
        }
    )


class ServicoUpdate(BaseModel):
    nome: str | None = Field(None, min_length=1, max_length=120)
    descricao: str | None = Field(None, max_length=500)
    duracao: int | None = Field(None, gt=0)
    preco: Decimal | None = Field(None, ge=0, decimal_places=2)


class Servico(BaseModel):
    """Serviço (leitura do DB)."""

    id: str
    nome: str
    descricao: str = ""
    duracao: int
    preco: Decimal

    model_config = ConfigDict(from_attributes=True)


class ProdutoCreate(BaseModel):
    """Schema para cadastro de produto."""

    nome: str = Field(..., min_length=1, max_length=120)
    descricao: str = Field("", max_length=500)
    preco: Decimal = Field(..., ge=0, decimal_places=2)
    estoque: int = Field(0, ge=0, description="Quantidade em estoque")
    categoria: str = Field("", max_length=60)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "nome": "Ração Premium",
                "descricao": "Ração de alta qualidade para cães adultos",
                "preco": "120.00",
                "estoque": 50,
                "categoria": "Alimentação",
            }
        }
    )


class ProdutoUpdate(BaseModel):
    nome: str | None = Field(None, min_length=1, max_length=120)
    descricao: str | None = Field(None, max_length=500)
    preco: Decimal | None = Field(None, ge=0, decimal_places=2)
    estoque: int | None = Field(None, ge=0)
    categoria: str | None = Field(None, max_length=60)


class Produto(BaseModel):
    """Produto (leitura do DB)."""

    id: str
    nome: str
    descricao: str = ""
    preco: Decimal
    estoque: int
    categoria: str = ""

    model_config = ConfigDict(from_attributes=True)
