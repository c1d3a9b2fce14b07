"""Error types raised while turning ingredients into a stored recipe."""

from typing import Optional


class RecipeError(Exception):
    """Base class for recipe pipeline failures."""

    default_message = "Failed to create recipe"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class IngredientsError(RecipeError):
    """Ingredients are missing, of the wrong type, or contain invalid input."""

    default_message = "Ingredients cannot be empty"


class GenerationError(RecipeError):
    """The language model could not produce a recipe."""

    default_message = "Failed to generate recipe"


class UpstreamRateLimitError(GenerationError):
    """The language model provider throttled the request."""

    default_message = "API rate limit exceeded. Please try again in about an hour"


class ParsingError(RecipeError):
    """Model output is not a JSON recipe."""

    default_message = "Failed to parse recipe"


class RecipeValidationError(RecipeError):
    """Parsed recipe is missing fields or has too little content."""

    default_message = "Recipe failed validation"


class CreationError(RecipeError):
    """The content store refused or failed to save the recipe."""

    default_message = "Failed to create recipe"
