"""Parsing and validation of model-generated recipe JSON."""

import json
import re
from dataclasses import dataclass
from typing import Any, List

from what_to_cook.core.errors import ParsingError, RecipeValidationError
from what_to_cook.core.logging import logger

REQUIRED_FIELDS = ("title", "ingredients", "instructions")
LIST_FIELDS = ("ingredients", "instructions")
MIN_TITLE_LENGTH = 3
MIN_INGREDIENTS = 2
MIN_INSTRUCTIONS = 2

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass
class RecipeAttributes:
    """Validated recipe content ready to be stored."""

    title: str
    ingredients: List[str]
    instructions: List[str]


def validate_recipe(data: Any) -> None:
    """Check recipe structure and minimum content.

    Raises:
        RecipeValidationError: On the first problem found
    """
    if not isinstance(data, dict):
        raise RecipeValidationError("Recipe data must be an object")

    missing = [field for field in REQUIRED_FIELDS if field not in data]
    if missing:
        raise RecipeValidationError(f"Missing required fields: {', '.join(missing)}")

    for field in LIST_FIELDS:
        if not isinstance(data[field], list):
            raise RecipeValidationError(f"{field.capitalize()} must be an array")

    if len(str(data["title"]).strip()) < MIN_TITLE_LENGTH:
        raise RecipeValidationError(
            f"Title must be at least {MIN_TITLE_LENGTH} characters long"
        )
    if len(data["ingredients"]) < MIN_INGREDIENTS:
        raise RecipeValidationError(f"Recipe must have at least {MIN_INGREDIENTS} ingredients")
    if len(data["instructions"]) < MIN_INSTRUCTIONS:
        raise RecipeValidationError(
            f"Recipe must have at least {MIN_INSTRUCTIONS} instructions"
        )
    if any(not str(item).strip() for item in data["ingredients"] + data["instructions"]):
        raise RecipeValidationError("Ingredients and instructions cannot contain blank entries")


def parse_recipe(raw: str) -> RecipeAttributes:
    """Decode model output into RecipeAttributes.

    Accepts a bare JSON object or one wrapped in a ```json fence.

    Raises:
        ParsingError: If raw is not JSON
        RecipeValidationError: If the JSON is not a usable recipe
    """
    text = (raw or "").strip()
    fenced = _FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except ValueError as e:
        logger.error("recipe_parse_failed", error=str(e))
        raise ParsingError(f"Invalid recipe format: {str(e)}") from e

    validate_recipe(data)
    logger.info("recipe_parsed", title=str(data["title"]))

    return RecipeAttributes(
        title=str(data["title"]).strip(),
        ingredients=[str(item).strip() for item in data["ingredients"]],
        instructions=[str(item).strip() for item in data["instructions"]],
    )
