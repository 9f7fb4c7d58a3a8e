"""HTTP API."""

from payforeman.api.app import create_app

__all__ = ["create_app"]
