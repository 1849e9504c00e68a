"""Webhook broker core.

Signed event payloads fanned out to registered subscriber callbacks,
with the outcome of every delivery recorded in the event ledger. The
dispatcher lives in `courier.webhooks.dispatcher`; it depends on the
stores, which depend on the models here.
"""

from courier.webhooks.errors import DeliveryError, ValidationError, WebhookError
from courier.webhooks.models import (
    DeliveryResult,
    Event,
    EventResult,
    EventStatus,
    ResultStatus,
    Subscriber,
    TriggerOutcome,
)
from courier.webhooks.signing import (
    SIGNATURE_HEADER,
    WebhookSigner,
    canonical_json,
    sign_payload,
    verify_signature,
)

__all__ = [
    "WebhookSigner",
    "SIGNATURE_HEADER",
    "canonical_json",
    "sign_payload",
    "verify_signature",
    "Subscriber",
    "Event",
    "EventResult",
    "EventStatus",
    "ResultStatus",
    "DeliveryResult",
    "TriggerOutcome",
    "WebhookError",
    "ValidationError",
    "DeliveryError",
]
