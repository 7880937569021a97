"""Contract Tests - Validate Pydantic schemas."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from petshop.contracts.agendamento import HorarioCreate, HorarioDisponivel, normalize_hora
from petshop.contracts.atendimento import Atendimento, ItemAtendimento, ItemAtendimentoCreate, Status
from petshop.contracts.auth import LoginRequest, SetupRequest
from petshop.contracts.catalogo import ProdutoCreate, ServicoCreate
from petshop.contracts.clientes import ClienteCreate, PetCreate, format_cpf
from petshop.contracts.funcionario import Funcionario, FuncionarioCreate, Perfil


class TestClienteContract:
    """Tests for client and pet schemas."""

    def test_cpf_is_formatted(self) -> None:
        cliente = ClienteCreate(
            nome="  Maria Silva ",
            email="maria@email.com",
            telefone="(11) 99999-8888",
            cpf="12345678900",
        )

        assert cliente.cpf == "123.456.789-00"
        assert cliente.nome == "Maria Silva"

    def test_formatted_cpf_accepted(self) -> None:
        assert format_cpf("123.456.789-00") == "123.456.789-00"

    def test_cpf_with_wrong_length(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ClienteCreate(
                nome="Maria",
                email="maria@email.com",
                telefone="(11) 99999-8888",
                cpf="1234",
            )

        assert "cpf" in str(exc_info.value)

    def test_invalid_email(self) -> None:
        with pytest.raises(ValidationError):
            ClienteCreate(
                nome="Maria",
                email="nao-e-email",
                telefone="(11) 99999-8888",
                cpf="12345678900",
            )

    def test_pet_weight_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            PetCreate(nome="Rex", especie="Cachorro", sexo="M", cliente_id="c1", peso=0)

    def test_pet_sex_enum(self) -> None:
        with pytest.raises(ValidationError):
            PetCreate(nome="Rex", especie="Cachorro", sexo="X", cliente_id="c1")


class TestCatalogoContract:
    def test_negative_price_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ServicoCreate(nome="Banho", duracao=60, preco=Decimal("-1"))

    def test_duration_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ServicoCreate(nome="Banho", duracao=0, preco=Decimal("70.00"))

    def test_negative_stock_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ProdutoCreate(nome="Ração", preco=Decimal("120.00"), estoque=-1)


class TestFuncionarioContract:
    def test_legacy_profile_maps_to_attendant(self) -> None:
        funcionario = Funcionario(
            id="f1", nome="Carlos", cargo="Auxiliar", email="c@petshop.com", perfil="funcionario"
        )

        assert funcionario.perfil == Perfil.ATENDENTE

    def test_missing_profile_is_attendant(self) -> None:
        assert Perfil.parse(None) == Perfil.ATENDENTE

    def test_unknown_profile_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Funcionario(id="f1", nome="X", cargo="Y", email="x@petshop.com", perfil="dono")

    def test_short_password_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FuncionarioCreate(
                nome="Ana",
                cargo="Tosadora",
                email="ana@petshop.com",
                email_login="ana@petshop.com",
                senha="123",
            )

    def test_password_hash_never_exposed(self) -> None:
        funcionario = Funcionario.model_validate(
            {
                "id": "f1",
                "nome": "Ana",
                "cargo": "Tosadora",
                "email": "ana@petshop.com",
                "senha_hash": "$2b$12$abc",
            }
        )

        assert "senha_hash" not in funcionario.model_dump()


class TestHorarioContract:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("09:00", "09:00"), ("9:05", "09:05"), ("14:30:00", "14:30")],
    )
    def test_normalize_hora(self, raw: str, expected: str) -> None:
        assert normalize_hora(raw) == expected

    @pytest.mark.parametrize("raw", ["25:00", "09:60", "nove", "09"])
    def test_invalid_hora(self, raw: str) -> None:
        with pytest.raises(ValueError):
            normalize_hora(raw)

    def test_slot_from_db_time_column(self) -> None:
        slot = HorarioDisponivel(
            id="h1", data="2026-02-15", hora="09:00:00", funcionario_id="f1"
        )

        assert slot.hora == "09:00"
        assert slot.disponivel is True

    def test_create_rejects_bad_time(self) -> None:
        with pytest.raises(ValidationError):
            HorarioCreate(data="2026-02-15", hora="99:99", funcionario_id="f1")


class TestAtendimentoContract:
    def test_item_subtotal(self) -> None:
        item = ItemAtendimento(
            id="i1", tipo="produto", item_id="p1", quantidade=3, valor_unitario="12.50"
        )

        assert item.subtotal == Decimal("37.50")

    def test_item_create_defaults_to_one_unit(self) -> None:
        assert ItemAtendimentoCreate(tipo="servico", item_id="s1").quantidade == 1

    def test_status_enum_values(self) -> None:
        assert Status.AGENDADO.value == "agendado"
        assert Status.EM_ANDAMENTO.value == "em_andamento"
        assert Status.CONCLUIDO.value == "concluido"
        assert Status.CANCELADO.value == "cancelado"

    def test_null_notes_read_as_empty(self) -> None:
        atendimento = Atendimento(
            id="a1",
            data="2026-02-15T10:00:00",
            status="agendado",
            cliente_id="c1",
            pet_id="p1",
            funcionario_id="f1",
            observacoes=None,
        )

        assert atendimento.observacoes == ""
        assert atendimento.itens == []


class TestAuthContract:
    def test_login_requires_password(self) -> None:
        with pytest.raises(ValidationError):
            LoginRequest(email="ana@petshop.com", senha="")

    def test_setup_password_length(self) -> None:
        with pytest.raises(ValidationError):
            SetupRequest(nome="Dona", email="dona@petshop.com", senha="12345")
