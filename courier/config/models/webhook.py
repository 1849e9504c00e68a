"""Webhook signing and delivery configuration."""

from pydantic import BaseModel, Field, SecretStr


class WebhookConfig(BaseModel):
    """Signing key and outbound delivery settings.

    The secret is read once at startup and shared by every trigger.
    """

    secret: SecretStr = Field(
        default=SecretStr("your-secret-key"),
        description="HMAC-SHA256 key used to compute X-Signature",
    )
    timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        le=120,
        description="Connect and response timeout for each delivery",
    )
    user_agent: str = Field(
        default="Courier-Webhook/1.0",
        description="User-Agent header sent to subscribers",
    )
    max_connections: int = Field(
        default=100,
        gt=0,
        description="Connection limit of the shared outbound HTTP client",
    )
