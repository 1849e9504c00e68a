"""Subscription management and event trigger routes."""

from fastapi import APIRouter

from courier.api.dependencies import DispatcherDep, SubscriptionStoreDep
from courier.api.models.webhooks import (
    SubscribeRequest,
    SubscribeResponse,
    SubscribersResponse,
    TriggerRequest,
    TriggerResponse,
    UnsubscribeRequest,
    UnsubscribeResponse,
)
from courier.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/test")
async def test_server() -> dict[str, str]:
    """Liveness probe kept for the ERP backends."""
    return {"message": "Server is running"}


@router.post("/subscribe", response_model=SubscribeResponse)
async def subscribe(
    subscriptions: SubscriptionStoreDep,
    request: SubscribeRequest | None = None,
) -> SubscribeResponse:
    """Register `url` as a callback for identity `who`.

    Registering an existing pair again returns the stored subscriber.
    """
    request = request or SubscribeRequest()
    subscriber = await subscriptions.subscribe(request.who, request.url)

    logger.info(
        "subscriber_registered",
        subscriber_id=str(subscriber.id),
        who=subscriber.who,
        url=subscriber.url,
    )
    return SubscribeResponse(message="Subscription successful", subscriber=subscriber)


@router.get("/subscribers", response_model=SubscribersResponse)
async def list_subscribers(subscriptions: SubscriptionStoreDep) -> SubscribersResponse:
    """List every registered subscriber, most recent first."""
    return SubscribersResponse(subscribers=await subscriptions.list_subscribers())


@router.post("/unsubscribe", response_model=UnsubscribeResponse)
async def unsubscribe(
    subscriptions: SubscriptionStoreDep,
    request: UnsubscribeRequest | None = None,
) -> UnsubscribeResponse:
    """Remove one (who, url) registration, or all of `who`'s."""
    request = request or UnsubscribeRequest()
    removed = await subscriptions.unsubscribe(request.who, request.url)

    logger.info("subscribers_unregistered", who=request.who, url=request.url, removed=removed)
    message = "Unsubscribed successfully" if removed else "No matching subscription"
    return UnsubscribeResponse(message=message, removed=removed)


@router.post(
    "/trigger-event",
    response_model=TriggerResponse,
    response_model_exclude_none=True,
)
async def trigger_event(
    dispatcher: DispatcherDep,
    request: TriggerRequest | None = None,
) -> TriggerResponse:
    """Send a signed event to the subscribers of the identities in `who`.

    Always 200 once the event is recorded; callers inspect each result's
    `ok` flag to detect partial delivery failures.
    """
    request = request or TriggerRequest()
    outcome = await dispatcher.trigger(
        request.from_,
        request.event,
        body=request.body,
        who=request.who,
    )
    return TriggerResponse(
        message=outcome.message,
        event_id=outcome.event_id,
        results=outcome.results,
    )
