"""Ingredient normalization and sanitization."""

import html
import re
from typing import Any, List

from what_to_cook.core.errors import IngredientsError

MAX_INPUT_LENGTH = 1000
ALLOWED_CHARACTERS = re.compile(r"^[a-zA-Z0-9\s,.()\-+'&]+$")


def process_ingredients(raw: Any) -> List[str]:
    """Split a comma-separated string, or stringify a list, into stripped items.

    Blank items are dropped.

    Raises:
        IngredientsError: If raw is neither a string nor a list
    """
    if isinstance(raw, str):
        items = raw.split(",")
    elif isinstance(raw, (list, tuple)):
        items = [str(item) for item in raw]
    else:
        raise IngredientsError(
            f"Invalid ingredients format. Expected String or Array, got {type(raw).__name__}"
        )
    return [item.strip() for item in items if item.strip()]


def sanitize_ingredient(item: str) -> str:
    item = item.strip()
    if len(item) > MAX_INPUT_LENGTH:
        raise IngredientsError(f"Input exceeds maximum length of {MAX_INPUT_LENGTH} characters")
    if not ALLOWED_CHARACTERS.match(item):
        raise IngredientsError("Input contains invalid characters")
    return html.escape(item)


def sanitize_ingredients(items: List[str]) -> List[str]:
    """Validate and HTML-escape each ingredient.

    Raises:
        IngredientsError: If the list is empty or an item is too long or has invalid characters
    """
    if not items:
        raise IngredientsError("Ingredients cannot be empty")
    return [sanitize_ingredient(item) for item in items]


def normalize_ingredients(raw: Any) -> List[str]:
    """process_ingredients followed by sanitize_ingredients."""
    return sanitize_ingredients(process_ingredients(raw))
