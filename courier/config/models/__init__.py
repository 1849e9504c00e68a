"""Configuration section models."""

from courier.config.models.api import APIConfig
from courier.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
    TracingConfig,
)
from courier.config.models.storage import StorageConfig
from courier.config.models.webhook import WebhookConfig

__all__ = [
    "APIConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "StorageConfig",
    "TracingConfig",
    "WebhookConfig",
]
