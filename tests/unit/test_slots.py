"""Unit Tests - Slot allocator."""

from datetime import date

import pytest

from petshop.contracts.agendamento import Agendamento, HorarioCreate
from petshop.core.errors import NotFoundError, ReferenceNotFoundError, SlotUnavailableError
from petshop.core.slots import CURRENT_SLOT_ID
from petshop.services.supabase import Table


class TestSlotAllocator:
    """Tests for SlotAllocator."""

    @pytest.mark.asyncio
    async def test_publish_range_uses_generator(self, deps, seeded, booking_day) -> None:
        slots = await deps.slots.publish_range(seeded["ana"].id, booking_day, "09:00", "10:00", 30)

        assert [s.hora for s in slots] == ["09:00", "09:30"]
        assert all(s.disponivel for s in slots)
        assert all(s.funcionario_nome == "Ana Souza" for s in slots)

    @pytest.mark.asyncio
    async def test_publish_for_unknown_employee(self, deps, booking_day) -> None:
        with pytest.raises(ReferenceNotFoundError):
            await deps.slots.publish("fantasma", booking_day, ["09:00"])

    @pytest.mark.asyncio
    async def test_candidates_are_sorted_and_only_available(
        self, deps, seeded, booking_day
    ) -> None:
        ana = seeded["ana"]
        await deps.slots.publish(ana.id, booking_day, ["11:00", "09:00", "10:00"])
        await deps.slots.publish(ana.id, date(2026, 2, 16), ["09:00"])
        taken = await deps.slots.add_slot(
            HorarioCreate(data=booking_day, hora="08:00", funcionario_id=ana.id, disponivel=False)
        )

        candidates = await deps.slots.list_candidates(booking_day)

        assert [c.hora for c in candidates] == ["09:00", "10:00", "11:00"]
        assert taken.id not in {c.id for c in candidates}

    @pytest.mark.asyncio
    async def test_editing_injects_current_slot(self, deps, seeded, booking_day) -> None:
        ana = seeded["ana"]
        await deps.slots.publish(ana.id, booking_day, ["09:00"])
        editing = Agendamento(
            id="a1",
            data=booking_day,
            hora="14:00",
            cliente_id=seeded["maria"].id,
            pet_id=seeded["rex"].id,
            servico_id=seeded["banho"].id,
            funcionario_id=ana.id,
            funcionario_nome=ana.nome,
        )

        candidates = await deps.slots.list_candidates(booking_day, editing=editing)

        assert [(c.id == CURRENT_SLOT_ID, c.hora) for c in candidates] == [
            (False, "09:00"),
            (True, "14:00"),
        ]

    @pytest.mark.asyncio
    async def test_editing_on_other_day_adds_nothing(self, deps, seeded, booking_day) -> None:
        editing = Agendamento(
            id="a1",
            data=date(2026, 3, 1),
            hora="14:00",
            cliente_id="c",
            pet_id="p",
            servico_id="s",
            funcionario_id=seeded["ana"].id,
        )

        assert await deps.slots.list_candidates(booking_day, editing=editing) == []

    @pytest.mark.asyncio
    async def test_resolve_missing_slot(self, deps) -> None:
        with pytest.raises(SlotUnavailableError) as exc:
            deps.slots.resolve("sumiu", [])

        assert exc.value.message == "O horário selecionado não está mais disponível"

    @pytest.mark.asyncio
    async def test_reserve_is_conditional(self, deps, seeded, booking_day, store) -> None:
        (slot,) = await deps.slots.publish(seeded["ana"].id, booking_day, ["09:00"])

        reserved = await deps.slots.reserve(slot)
        assert reserved.disponivel is False

        # Segunda reserva do mesmo horário (corrida perdida)
        with pytest.raises(SlotUnavailableError):
            await deps.slots.reserve(slot)

        assert store.tables[Table.HORARIOS_DISPONIVEIS][slot.id]["disponivel"] is False

    @pytest.mark.asyncio
    async def test_release_matches_time_column_format(
        self, deps, seeded, booking_day, store
    ) -> None:
        (slot,) = await deps.slots.publish(seeded["ana"].id, booking_day, ["09:00"])
        await deps.slots.reserve(slot)
        # Postgres devolve a coluna time como HH:MM:SS
        store.tables[Table.HORARIOS_DISPONIVEIS][slot.id]["hora"] = "09:00:00"

        assert await deps.slots.release(booking_day, "09:00", seeded["ana"].id) is True
        assert store.tables[Table.HORARIOS_DISPONIVEIS][slot.id]["disponivel"] is True

    @pytest.mark.asyncio
    async def test_release_without_slot_is_noop(self, deps, seeded, booking_day) -> None:
        assert await deps.slots.release(booking_day, "09:00", seeded["ana"].id) is False

    @pytest.mark.asyncio
    async def test_delete_slot(self, deps, seeded, booking_day) -> None:
        (slot,) = await deps.slots.publish(seeded["ana"].id, booking_day, ["09:00"])

        await deps.slots.delete_slot(slot.id)

        with pytest.raises(NotFoundError):
            await deps.slots.delete_slot(slot.id)
