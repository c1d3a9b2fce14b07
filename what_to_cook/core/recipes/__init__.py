"""Recipe backend: ingredient handling, generation and parsing."""

from what_to_cook.core.recipes.generator import RecipeGenerator
from what_to_cook.core.recipes.ingredients import (
    normalize_ingredients,
    process_ingredients,
    sanitize_ingredients,
)
from what_to_cook.core.recipes.parser import RecipeAttributes, parse_recipe, validate_recipe

__all__ = [
    "RecipeAttributes",
    "RecipeGenerator",
    "normalize_ingredients",
    "parse_recipe",
    "process_ingredients",
    "sanitize_ingredients",
    "validate_recipe",
]
