"""Request models for the What To Cook API."""

from typing import List, Optional, Union

from pydantic import BaseModel, Field


class RecipeCreateRequest(BaseModel):
    """Request for POST /api/v1/recipes endpoint."""

    ingredients: Optional[Union[str, List[str]]] = Field(
        None,
        description="Comma-separated string or list of ingredients",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"ingredients": "tomatoes, pasta, olive oil"},
                {"ingredients": ["eggs", "flour", "milk"]},
            ]
        }
    }
