"""Recipe creation pipeline: ingredients in, stored recipe out."""

import asyncio
from typing import Any, Optional

from what_to_cook.core.logging import logger
from what_to_cook.core.recipes.generator import RecipeGenerator
from what_to_cook.core.recipes.ingredients import normalize_ingredients
from what_to_cook.core.recipes.parser import parse_recipe
from what_to_cook.infrastructure.database import RecipeRecord, RecipeRepository


class RecipeService:
    """Normalizes ingredients, generates and parses a recipe, and stores it.

    Args:
        generator: RecipeGenerator instance (optional)
        repository: RecipeRepository instance (optional)
    """

    def __init__(
        self,
        generator: Optional[RecipeGenerator] = None,
        repository: Optional[RecipeRepository] = None,
    ):
        self.generator = generator or RecipeGenerator()
        self.repository = repository or RecipeRepository()

    async def create_recipe(self, raw_ingredients: Any) -> RecipeRecord:
        """Run the whole pipeline.

        Raises:
            RecipeError: Any subclass, depending on which stage failed
        """
        ingredients = normalize_ingredients(raw_ingredients)
        logger.info("ingredients_processed", ingredients=ingredients)

        raw_recipe = await self.generator.generate(ingredients)
        attributes = parse_recipe(raw_recipe)

        record = await asyncio.to_thread(self.repository.create, attributes)
        logger.info("recipe_created", recipe_id=record.id, title=record.title)
        return record

    async def get_recipe(self, recipe_id: Any) -> Optional[RecipeRecord]:
        return await asyncio.to_thread(self.repository.get, recipe_id)
