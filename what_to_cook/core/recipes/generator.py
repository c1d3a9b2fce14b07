"""Recipe generation through the language model."""

from typing import List, Optional

from what_to_cook.core.errors import GenerationError, IngredientsError, UpstreamRateLimitError
from what_to_cook.core.execution import ErrorCategory
from what_to_cook.core.logging import logger
from what_to_cook.integrations.gemini import GeminiClient, GeminiError

FEASIBILITY_PROMPT = (
    "Can a coherent dish be cooked using mainly these ingredients: {ingredients}? "
    "Answer with a single word: yes or no."
)

RECIPE_PROMPT = """Generate a recipe using these ingredients: {ingredients}.
You may add common pantry staples (salt, pepper, oil, water).

Respond with a JSON object only:
{{
  "title": "Recipe name",
  "ingredients": ["quantity and ingredient", "..."],
  "instructions": ["step", "..."]
}}"""


class RecipeGenerator:
    """Asks the model whether the ingredients make a dish, then for a JSON recipe.

    Args:
        client: Gemini client; resolved lazily from the environment if omitted
    """

    def __init__(self, client: Optional[GeminiClient] = None):
        self._client = client

    async def _get_client(self) -> GeminiClient:
        if self._client is None:
            try:
                self._client = await GeminiClient.get_instance()
            except (ValueError, RuntimeError) as e:
                raise GenerationError(f"Recipe generator unavailable: {str(e)}") from e
        return self._client

    @staticmethod
    def _translate(error: GeminiError) -> GenerationError:
        logger.error("gemini_call_failed", category=error.category.value, error=str(error))
        if error.category == ErrorCategory.RATE_LIMIT:
            return UpstreamRateLimitError()
        return GenerationError(f"Failed to generate recipe: {str(error)}")

    async def check_feasibility(self, ingredients: List[str]) -> None:
        """Raises GenerationError unless the model answers yes."""
        client = await self._get_client()
        try:
            answer = await client.generate_text(
                FEASIBILITY_PROMPT.format(ingredients=", ".join(ingredients)),
                max_tokens=10,
            )
        except GeminiError as e:
            raise self._translate(e) from e

        if answer.strip().strip(".!").lower() != "yes":
            logger.info("ingredients_not_feasible", ingredients=ingredients, answer=answer[:50])
            raise GenerationError("These ingredients cannot make a coherent dish")

    async def generate(self, ingredients: List[str]) -> str:
        """Return the model's raw JSON recipe text.

        Raises:
            IngredientsError: If ingredients is empty
            GenerationError: If the ingredients are not feasible or the call fails
            UpstreamRateLimitError: If the provider throttled the call
        """
        if not ingredients:
            raise IngredientsError("Ingredients cannot be empty")

        await self.check_feasibility(ingredients)

        client = await self._get_client()
        try:
            return await client.generate_json(
                RECIPE_PROMPT.format(ingredients=", ".join(ingredients))
            )
        except GeminiError as e:
            raise self._translate(e) from e
