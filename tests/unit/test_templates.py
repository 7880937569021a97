"""Unit Tests - Email templates."""

import pytest

from petshop.core.templates import SUBJECTS, TEMPLATES, format_template, get_subject, get_template


class TestTemplates:
    """Tests for reminder email templates."""

    def test_all_reminder_kinds_have_subject_and_body(self) -> None:
        assert set(TEMPLATES) == set(SUBJECTS) == {"confirmacao", "lembrete"}

    def test_subjects(self) -> None:
        assert get_subject("confirmacao") == "Confirmação de Agendamento"
        assert get_subject("lembrete") == "Lembrete de Consulta"

    def test_unknown_kind_raises(self) -> None:
        with pytest.raises(KeyError):
            get_template("promocao")

    def test_format_template_fills_placeholders(self) -> None:
        result = format_template(
            "confirmacao",
            cliente="Maria",
            pet="Rex",
            servico="Banho",
            data="15/02/2026",
            hora="09:00",
            assinatura="Equipe Pet Shop",
        )

        assert "Olá Maria," in result
        assert "Banho com o pet Rex foi confirmado para o dia 15/02/2026 às 09:00" in result
        assert result.endswith("Equipe Pet Shop")

    def test_missing_placeholders_render_empty(self) -> None:
        result = format_template("lembrete", cliente="Maria")

        assert "{" not in result
        assert "Olá Maria," in result
