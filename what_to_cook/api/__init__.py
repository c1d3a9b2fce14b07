"""HTTP layer for the What To Cook API."""

from what_to_cook.api.app import create_app

__all__ = ["create_app"]
