"""Unit tests for InMemoryEventLedger."""

from uuid import uuid4

import pytest

from courier.db.errors import NotFoundError, StatusTransitionError
from courier.ledger import InMemoryEventLedger
from courier.webhooks.models import EventStatus, ResultStatus


@pytest.fixture
def ledger() -> InMemoryEventLedger:
    return InMemoryEventLedger()


class TestRecordEvent:
    """Tests for record_event."""

    async def test_new_event_is_pending(self, ledger: InMemoryEventLedger) -> None:
        payload = {"event": "ping", "from": "erp-a", "body": None}
        event = await ledger.record_event("ping", payload, "erp-a")

        assert event.status is EventStatus.PENDING
        assert event.payload == payload
        assert event.sender == "erp-a"
        assert await ledger.get_event(event.id) == event

    async def test_unknown_event_is_none(self, ledger: InMemoryEventLedger) -> None:
        assert await ledger.get_event(uuid4()) is None


class TestUpdateStatus:
    """Tests for update_status."""

    async def test_pending_to_done(self, ledger: InMemoryEventLedger) -> None:
        event = await ledger.record_event("ping", {}, "erp-a")

        updated = await ledger.update_status(event.id, EventStatus.DONE)

        assert updated.status is EventStatus.DONE
        assert (await ledger.get_event(event.id)).status is EventStatus.DONE

    async def test_other_fields_unchanged(self, ledger: InMemoryEventLedger) -> None:
        event = await ledger.record_event("ping", {"k": "v"}, "erp-a")

        updated = await ledger.update_status(event.id, EventStatus.NO_RECIPIENTS)

        assert updated.model_dump(exclude={"status"}) == event.model_dump(exclude={"status"})

    async def test_repeat_is_idempotent(self, ledger: InMemoryEventLedger) -> None:
        event = await ledger.record_event("ping", {}, "erp-a")
        await ledger.update_status(event.id, EventStatus.DONE)

        again = await ledger.update_status(event.id, EventStatus.DONE)

        assert again.status is EventStatus.DONE

    async def test_second_terminal_refused(self, ledger: InMemoryEventLedger) -> None:
        event = await ledger.record_event("ping", {}, "erp-a")
        await ledger.update_status(event.id, EventStatus.DONE)

        with pytest.raises(StatusTransitionError):
            await ledger.update_status(event.id, EventStatus.NO_MATCHING_SUBSCRIBERS)

        assert (await ledger.get_event(event.id)).status is EventStatus.DONE

    async def test_unknown_event(self, ledger: InMemoryEventLedger) -> None:
        with pytest.raises(NotFoundError):
            await ledger.update_status(uuid4(), EventStatus.DONE)


class TestResults:
    """Tests for record_result and list_results."""

    async def test_results_listed_per_event(self, ledger: InMemoryEventLedger) -> None:
        first = await ledger.record_event("ping", {}, "erp-a")
        second = await ledger.record_event("ping", {}, "erp-a")
        sub_a, sub_b = uuid4(), uuid4()

        await ledger.record_result(first.id, sub_a, ResultStatus.OK, "OK")
        await ledger.record_result(second.id, sub_a, ResultStatus.ERROR, "Connection refused")
        await ledger.record_result(first.id, sub_b, ResultStatus.FAILED, "Bad Gateway")

        results = await ledger.list_results(first.id)
        assert [(r.subscriber_id, r.status) for r in results] == [
            (sub_a, ResultStatus.OK),
            (sub_b, ResultStatus.FAILED),
        ]

    async def test_response_may_be_none(self, ledger: InMemoryEventLedger) -> None:
        event = await ledger.record_event("ping", {}, "erp-a")

        result = await ledger.record_result(event.id, uuid4(), ResultStatus.OK, None)

        assert result.response is None


class TestListEvents:
    """Tests for list_events."""

    async def test_newest_first_with_paging(self, ledger: InMemoryEventLedger) -> None:
        events = [await ledger.record_event(f"e{i}", {}, "erp-a") for i in range(5)]

        page = await ledger.list_events(limit=2, offset=1)

        assert [e.id for e in page] == [events[3].id, events[2].id]

    async def test_empty(self, ledger: InMemoryEventLedger) -> None:
        assert await ledger.list_events() == []

    async def test_health_check(self, ledger: InMemoryEventLedger) -> None:
        assert await ledger.health_check() is True
