"""Domain-event endpoints called by the ERP backends on demande changes.

Each notification is broadcast to every registered identity except the
sender.
"""

from fastapi import APIRouter

from courier.api.dependencies import DispatcherDep
from courier.api.models.webhooks import DemandeNotification, NotificationResponse
from courier.observability.logging import get_logger
from courier.webhooks.validation import require_text

logger = get_logger(__name__)

router = APIRouter(prefix="/api/demandes")

EVENT_ADD = "add-demande"
EVENT_UPDATE = "update-demande"
EVENT_DELETE = "delete-demande"

NOTIFICATIONS_SENT = "Webhook notifications sent"


async def _notify(
    dispatcher: DispatcherDep,
    notification: DemandeNotification | None,
    event: str,
    demande_id: str | None = None,
) -> NotificationResponse:
    notification = notification or DemandeNotification()
    require_text(notification.message, "message")

    outcome = await dispatcher.broadcast(notification.from_, event, notification.body)

    logger.info(
        "demande_notification_sent",
        event_name=event,
        demande_id=demande_id,
        sender=notification.from_,
        event_id=str(outcome.event_id),
        targets=len(outcome.results),
    )
    return NotificationResponse(message=NOTIFICATIONS_SENT)


@router.post("", response_model=NotificationResponse)
async def demande_created(
    dispatcher: DispatcherDep,
    notification: DemandeNotification | None = None,
) -> NotificationResponse:
    """Broadcast `add-demande`."""
    return await _notify(dispatcher, notification, EVENT_ADD)


@router.put("/{demande_id}", response_model=NotificationResponse)
async def demande_updated(
    demande_id: str,
    dispatcher: DispatcherDep,
    notification: DemandeNotification | None = None,
) -> NotificationResponse:
    """Broadcast `update-demande`."""
    return await _notify(dispatcher, notification, EVENT_UPDATE, demande_id)


@router.delete("/{demande_id}", response_model=NotificationResponse)
async def demande_deleted(
    demande_id: str,
    dispatcher: DispatcherDep,
    notification: DemandeNotification | None = None,
) -> NotificationResponse:
    """Broadcast `delete-demande`."""
    return await _notify(dispatcher, notification, EVENT_DELETE, demande_id)
