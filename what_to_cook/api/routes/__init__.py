"""Routes for the What To Cook API."""

from what_to_cook.api.routes import recipes, system

__all__ = ["recipes", "system"]
