"""Webhook fan-out dispatcher with HMAC signing.

One trigger = one ledger event, one signed payload and one concurrent
delivery attempt per resolved subscriber. Nothing is retried.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, cast

import httpx

from courier.db.errors import StoreError
from courier.ledger.store import EventLedger
from courier.observability.logging import get_logger
from courier.observability.metrics import (
    DELIVERY_COUNT,
    DELIVERY_LATENCY,
    LEDGER_WRITE_FAILURES,
    TARGETS_PER_TRIGGER,
    TRIGGER_COUNT,
)
from courier.subscriptions.store import SubscriptionStore
from courier.webhooks.errors import DeliveryError
from courier.webhooks.models import (
    DeliveryResult,
    Event,
    EventStatus,
    ResultStatus,
    Subscriber,
    TriggerOutcome,
)
from courier.webhooks.signing import SIGNATURE_HEADER, WebhookSigner
from courier.webhooks.validation import require_json_value, require_text, require_text_list

logger = get_logger(__name__)

MSG_NO_RECIPIENTS = "No recipients specified; nothing sent"
MSG_NO_MATCHING = "No matching subscribers found"
MSG_PROCESSED = "Event processed"


@dataclass(frozen=True)
class DeliveryAttempt:
    """Classified outcome of one POST, before it is written to the ledger."""

    subscriber: Subscriber
    status: ResultStatus
    response: str | None
    status_code: int | None = None
    error: str | None = None

    def to_result(self) -> DeliveryResult:
        return DeliveryResult(
            who=self.subscriber.who,
            url=self.subscriber.url,
            ok=self.status is ResultStatus.OK,
            status=self.status_code,
            error=self.error,
        )


class WebhookDispatcher:
    """Resolve targets, sign, deliver concurrently and record outcomes.

    Holds no state of its own: subscribers come from the SubscriptionStore
    and every write goes to the EventLedger.
    """

    def __init__(
        self,
        subscriptions: SubscriptionStore,
        ledger: EventLedger,
        signer: WebhookSigner,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
        user_agent: str = "Courier-Webhook/1.0",
    ) -> None:
        """Initialize dispatcher.

        Args:
            subscriptions: Where target subscribers are resolved
            ledger: Where events and delivery results are recorded
            signer: Signs payloads with the process-wide secret
            client: Shared HTTP client; created lazily when omitted
            timeout_seconds: Per-delivery timeout for a lazily created client
            user_agent: User-Agent header sent to subscribers
        """
        self._subscriptions = subscriptions
        self._ledger = ledger
        self._signer = signer
        self._client = client
        self._owns_client = client is None
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout_seconds)
        return self._client

    async def trigger(
        self,
        from_: str,
        event: str,
        body: Any = None,
        who: Sequence[str] | None = None,
    ) -> TriggerOutcome:
        """Send `event` to every subscriber registered under an identity in `who`.

        Args:
            from_: Sender identity
            event: Event name
            body: Arbitrary JSON-serializable event body
            who: Target identities; absent or empty means nobody

        Returns:
            Message and per-target results in resolution order

        Raises:
            ValidationError: If from_/event are not non-empty strings,
                or body is not strict JSON
            StoreError: If the event cannot be recorded or targets resolved
        """
        from_ = require_text(from_, "from")
        event = require_text(event, "event")
        identities = require_text_list(who, "who")
        body = require_json_value(body, "body")

        async def resolve() -> list[str]:
            return identities

        return await self._process(from_, event, body, resolve)

    async def broadcast(self, from_: str, event: str, body: Any = None) -> TriggerOutcome:
        """Send `event` to every registered identity except the sender."""
        from_ = require_text(from_, "from")
        event = require_text(event, "event")
        body = require_json_value(body, "body")

        async def resolve() -> list[str]:
            identities = await self._subscriptions.list_identities()
            return [who for who in identities if who != from_]

        return await self._process(from_, event, body, resolve)

    async def _process(
        self,
        from_: str,
        event: str,
        body: Any,
        resolve_identities: Callable[[], Awaitable[list[str]]],
    ) -> TriggerOutcome:
        payload = {"event": event, "from": from_, "body": body}
        payload_json = self._signer.serialize(payload)
        signature = self._signer.sign_body(payload_json)

        # Persisted before any network call so a crash leaves a pending event
        record = await self._ledger.record_event(event, payload, from_)
        log = logger.bind(event_id=str(record.id), event_name=event, sender=from_)

        identities = await resolve_identities()
        if not identities:
            await self._finish(record, EventStatus.NO_RECIPIENTS)
            log.info("trigger_no_recipients")
            return TriggerOutcome(message=MSG_NO_RECIPIENTS, event_id=record.id)

        targets = await self._subscriptions.find_by_who_list(identities)
        TARGETS_PER_TRIGGER.observe(len(targets))
        if not targets:
            await self._finish(record, EventStatus.NO_MATCHING_SUBSCRIBERS)
            log.info("trigger_no_matching_subscribers", who=identities)
            return TriggerOutcome(message=MSG_NO_MATCHING, event_id=record.id)

        log.info("trigger_dispatching", targets=len(targets))
        results = await self._fan_out(record, targets, payload_json, signature)

        await self._complete(record)
        log.info(
            "trigger_completed",
            targets=len(results),
            delivered=sum(1 for r in results if r.ok),
        )
        return TriggerOutcome(message=MSG_PROCESSED, event_id=record.id, results=results)

    async def _fan_out(
        self,
        record: Event,
        targets: list[Subscriber],
        payload_json: str,
        signature: str,
    ) -> list[DeliveryResult]:
        """Deliver to all targets concurrently; each task fills its own slot."""
        slots: list[DeliveryResult | None] = [None] * len(targets)

        async def run(index: int, subscriber: Subscriber) -> None:
            attempt = await self.deliver(subscriber, payload_json, signature, record.event)
            slots[index] = attempt.to_result()
            await self._record_result(record, attempt)

        # gather re-raises the first task failure, so every slot is filled here
        await asyncio.gather(*(run(i, s) for i, s in enumerate(targets)))
        return cast(list[DeliveryResult], slots)

    async def deliver(
        self,
        subscriber: Subscriber,
        payload_json: str,
        signature: str,
        event_name: str,
    ) -> DeliveryAttempt:
        """POST a signed payload to one subscriber and classify the outcome.

        Never raises for subscriber-side failures: they come back as
        `failed` (non-2xx) or `error` (request did not complete).
        """
        headers = {
            "Content-Type": "application/json",
            SIGNATURE_HEADER: signature,
            "User-Agent": self._user_agent,
        }

        start_time = time.monotonic()
        try:
            client = await self._ensure_client()
            response = await client.post(
                subscriber.url,
                content=payload_json.encode(),
                headers=headers,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            attempt = self._error_attempt(subscriber, e)
        else:
            if response.is_success:
                attempt = DeliveryAttempt(
                    subscriber=subscriber,
                    status=ResultStatus.OK,
                    response=response.text,
                    status_code=response.status_code,
                )
            else:
                attempt = DeliveryAttempt(
                    subscriber=subscriber,
                    status=ResultStatus.FAILED,
                    response=response.text,
                    status_code=response.status_code,
                )

        elapsed = time.monotonic() - start_time
        DELIVERY_COUNT.labels(outcome=attempt.status.value).inc()
        DELIVERY_LATENCY.labels(outcome=attempt.status.value).observe(elapsed)
        self._log_attempt(attempt, event_name, int(elapsed * 1000))
        return attempt

    def _error_attempt(self, subscriber: Subscriber, exc: Exception) -> DeliveryAttempt:
        error = DeliveryError(str(exc) or type(exc).__name__)
        return DeliveryAttempt(
            subscriber=subscriber,
            status=ResultStatus.ERROR,
            response=error.message,
            error=error.message,
        )

    def _log_attempt(self, attempt: DeliveryAttempt, event_name: str, elapsed_ms: int) -> None:
        fields = {
            "subscriber_id": str(attempt.subscriber.id),
            "who": attempt.subscriber.who,
            "url": attempt.subscriber.url,
            "event_name": event_name,
            "response_time_ms": elapsed_ms,
        }
        if attempt.status is ResultStatus.OK:
            logger.info("webhook_delivered", status_code=attempt.status_code, **fields)
        elif attempt.status is ResultStatus.FAILED:
            logger.warning(
                "webhook_rejected",
                status_code=attempt.status_code,
                response_preview=(attempt.response or "")[:200],
                **fields,
            )
        else:
            logger.warning("webhook_unreachable", error=attempt.error, **fields)

    async def _record_result(self, record: Event, attempt: DeliveryAttempt) -> None:
        """Write one outcome to the ledger; failures are logged and ignored."""
        try:
            await self._ledger.record_result(
                record.id,
                attempt.subscriber.id,
                attempt.status,
                attempt.response,
            )
        except StoreError as e:
            LEDGER_WRITE_FAILURES.inc()
            logger.error(
                "event_result_record_failed",
                event_id=str(record.id),
                subscriber_id=str(attempt.subscriber.id),
                outcome=attempt.status.value,
                error=str(e),
            )

    async def _finish(self, record: Event, status: EventStatus) -> None:
        await self._ledger.update_status(record.id, status)
        TRIGGER_COUNT.labels(status=status.value).inc()

    async def _complete(self, record: Event) -> None:
        """Mark a delivered event done; the results are returned even if this fails."""
        try:
            await self._finish(record, EventStatus.DONE)
        except StoreError as e:
            LEDGER_WRITE_FAILURES.inc()
            logger.error(
                "event_status_update_failed",
                event_id=str(record.id),
                status=EventStatus.DONE.value,
                error=str(e),
            )

    async def close(self) -> None:
        """Close the HTTP client if this dispatcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
