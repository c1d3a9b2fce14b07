"""API models for the What To Cook API."""

from what_to_cook.api.models.requests import RecipeCreateRequest

__all__ = ["RecipeCreateRequest"]
