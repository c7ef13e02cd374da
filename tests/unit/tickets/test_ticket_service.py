"""Unit tests for TicketService."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from repairdesk.core.errors import ConstraintViolationError, NotFoundError
from repairdesk.modules.tickets.schemas import TicketCreate, TicketUpdate
from repairdesk.modules.tickets.services import TicketService


pytestmark = pytest.mark.unit


def ticket_create(**overrides) -> TicketCreate:
    data = {
        "clientId": "NIF123456789",
        "customerName": "Ana Silva",
        "contact": "+351 910 000 000",
        "imeiNo": "356938035643809",
        "brand": "Samsung",
        "model": "Galaxy S21",
        "problem": "Screen cracked",
        "price": "49.99",
        "selectedServices": ["Battery Change"],
    }
    data.update(overrides)
    return TicketCreate.model_validate(data)


def make_repo(latest: dict[str, str | None] | None = None) -> AsyncMock:
    """Repository mock whose latest_with_prefix answers from ``latest``."""
    latest = latest or {}
    repo = AsyncMock()
    repo.find_by.return_value = None
    repo.latest_with_prefix.side_effect = lambda column, prefix: latest.get(prefix)
    repo.insert.side_effect = lambda values: dict(values)
    return repo


class TestCreateTicket:
    """Tests for TicketService.create_ticket."""

    async def test_generates_numbers(self):
        year = datetime.now(UTC).year
        repo = make_repo()
        service = TicketService(repo, max_attempts=3)

        ticket = await service.create_ticket(ticket_create(), "user-1")

        assert ticket["repairNumber"] == f"{year}-0001"
        assert ticket["spu"] == "SPU-BAT-001"
        assert ticket["serialNo"].startswith(f"SN-{year}")
        assert ticket["serialNo"].endswith("-0001")
        assert ticket["userId"] == "user-1"
        assert ticket["price"] == Decimal("49.99")
        assert ticket["status"] == "PENDING"

    async def test_continues_after_latest_including_legacy_format(self):
        year = datetime.now(UTC).year
        repo = make_repo(
            {
                f"{year}-": f"{year}-0004",
                f"REP-{year}-": f"REP-{year}-0010",
                "SPU-BAT-": "SPU-BAT-041",
            }
        )
        service = TicketService(repo, max_attempts=3)

        ticket = await service.create_ticket(ticket_create(), "user-1")

        assert ticket["repairNumber"] == f"{year}-0011"
        assert ticket["spu"] == "SPU-BAT-042"

    async def test_supplied_serial_number_is_kept(self):
        repo = make_repo()
        service = TicketService(repo, max_attempts=3)

        ticket = await service.create_ticket(ticket_create(serialNo=" R58N123 "), "user-1")

        assert ticket["serialNo"] == "R58N123"
        prefixes = [call.args[1] for call in repo.latest_with_prefix.await_args_list]
        assert not any(prefix.startswith("SN-") for prefix in prefixes)

    async def test_duplicate_imei_is_rejected_before_insert(self):
        repo = make_repo()
        repo.find_by.return_value = {"id": "other"}
        service = TicketService(repo, max_attempts=3)

        with pytest.raises(ConstraintViolationError) as exc_info:
            await service.create_ticket(ticket_create(), "user-1")

        assert exc_info.value.field == "imeiNo"
        repo.insert.assert_not_awaited()

    async def test_number_collision_is_retried(self):
        repo = make_repo()
        repo.insert.side_effect = [
            ConstraintViolationError(field="repairNumber"),
            {"id": "t1", "repairNumber": "2026-0002"},
        ]
        service = TicketService(repo, max_attempts=3)

        ticket = await service.create_ticket(ticket_create(), "user-1")

        assert ticket["id"] == "t1"
        assert repo.insert.await_count == 2

    async def test_number_collision_gives_up_after_max_attempts(self):
        repo = make_repo()
        repo.insert.side_effect = ConstraintViolationError(field="spu")
        service = TicketService(repo, max_attempts=3)

        with pytest.raises(ConstraintViolationError) as exc_info:
            await service.create_ticket(ticket_create(), "user-1")

        assert exc_info.value.field == "spu"
        assert repo.insert.await_count == 3

    async def test_imei_race_is_not_retried(self):
        repo = make_repo()
        repo.insert.side_effect = ConstraintViolationError(field="imeiNo")
        service = TicketService(repo, max_attempts=3)

        with pytest.raises(ConstraintViolationError):
            await service.create_ticket(ticket_create(), "user-1")

        repo.insert.assert_awaited_once()


class TestTicketSchemas:
    """Tests for request validation."""

    @pytest.mark.parametrize("imei", ["12345", "35693803564380A", "3569380356438090"])
    def test_imei_must_be_15_digits(self, imei):
        with pytest.raises(ValueError):
            ticket_create(imeiNo=imei)

    def test_client_id_is_required(self):
        with pytest.raises(ValueError):
            ticket_create(clientId="   ")


class TestOtherOperations:
    """Tests for update, delete and restore."""

    async def test_update_only_sends_set_fields(self):
        repo = make_repo()
        repo.update.return_value = {"id": "t1"}
        service = TicketService(repo, max_attempts=3)

        await service.update_ticket("t1", TicketUpdate.model_validate({"status": "COMPLETED"}))

        repo.update.assert_awaited_once_with("t1", {"status": "COMPLETED"})

    async def test_update_rejects_imei_of_another_ticket(self):
        repo = make_repo()
        repo.find_by.return_value = {"id": "t2"}
        service = TicketService(repo, max_attempts=3)

        with pytest.raises(ConstraintViolationError):
            await service.update_ticket(
                "t1", TicketUpdate.model_validate({"imeiNo": "356938035643809"})
            )

    async def test_delete_missing_ticket(self):
        repo = make_repo()
        repo.soft_delete.return_value = False
        service = TicketService(repo, max_attempts=3)

        with pytest.raises(NotFoundError):
            await service.delete_ticket("missing")

    async def test_restore_missing_ticket(self):
        repo = make_repo()
        repo.restore.return_value = False
        service = TicketService(repo, max_attempts=3)

        with pytest.raises(NotFoundError) as exc_info:
            await service.restore_ticket("missing")

        assert exc_info.value.details["resource"] == "deleted_ticket"
