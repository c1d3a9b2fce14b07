"""Recipe routes for the What To Cook API."""

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from what_to_cook.api.dependencies import get_recipe_service
from what_to_cook.api.models import RecipeCreateRequest
from what_to_cook.config import API_PREFIX, RECIPES_ROUTE
from what_to_cook.core.errors import RecipeError
from what_to_cook.core.execution import ErrorClassifier
from what_to_cook.core.logging import logger
from what_to_cook.core.recipes.service import RecipeService
from what_to_cook.infrastructure.rate_limit import (
    QuotaPolicy,
    RequestCounter,
    get_quota_policy,
    get_request_counter,
)

router = APIRouter(prefix=API_PREFIX, tags=["Recipes"])


def _error_response(
    error: Exception, counter: RequestCounter, policy: QuotaPolicy
) -> JSONResponse:
    """Error body with the caller's quota; failed requests never consume it."""
    status_code = ErrorClassifier.status_for(error)
    if isinstance(error, RecipeError):
        message = error.message
        logger.warning(
            "recipe_request_failed",
            error_type=type(error).__name__,
            status_code=status_code,
            error=message,
        )
    else:
        message = "An unexpected error occurred"
        logger.exception("recipe_request_crashed", error=str(error))

    content: Dict[str, Any] = {
        "error": message,
        "remaining_requests": policy.remaining(counter),
    }
    if status_code == 429:
        content.update(policy.retry_fields(counter))
    return JSONResponse(status_code=status_code, content=content)


@router.post(RECIPES_ROUTE, status_code=201)
async def create_recipe_route(
    request_data: RecipeCreateRequest,
    service: RecipeService = Depends(get_recipe_service),
    counter: RequestCounter = Depends(get_request_counter),
    policy: QuotaPolicy = Depends(get_quota_policy),
):
    """Generate a recipe from ingredients and store it.

    - **ingredients**: Comma-separated string or list of ingredients

    The quota gate counts the request once it succeeds and updates
    remaining_requests accordingly.
    """
    try:
        record = await service.create_recipe(request_data.ingredients)
    except Exception as e:
        return _error_response(e, counter, policy)

    return JSONResponse(
        status_code=201,
        content={
            "recipe": record.to_dict(),
            "remaining_requests": policy.remaining(counter),
        },
    )


@router.get(RECIPES_ROUTE + "/{recipe_id}")
async def get_recipe_route(
    recipe_id: str,
    service: RecipeService = Depends(get_recipe_service),
):
    """Get a stored recipe by id."""
    record = await service.get_recipe(recipe_id)
    if record is None:
        return JSONResponse(status_code=404, content={"error": "Recipe not found"})
    return JSONResponse(content={"recipe": record.to_dict()})


@router.get("/quota")
async def quota_route(
    counter: RequestCounter = Depends(get_request_counter),
    policy: QuotaPolicy = Depends(get_quota_policy),
):
    """Current recipe request quota for the caller's session."""
    return policy.snapshot(counter)
