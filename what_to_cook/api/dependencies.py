"""FastAPI dependencies for the What To Cook API.

Dependency injection functions for route handlers.
"""

from fastapi import Request

from what_to_cook.core.recipes.service import RecipeService


def get_recipe_service(request: Request) -> RecipeService:
    """Get the RecipeService from app state.

    Note:
        Set via create_app(recipe_service=...); a default service is built otherwise.
    """
    service = getattr(request.app.state, "recipe_service", None)
    if service is None:
        service = RecipeService()
        request.app.state.recipe_service = service
    return service
