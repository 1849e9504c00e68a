"""HTTP boundary of the broker."""

from courier.api.app import create_app

__all__ = ["create_app"]
