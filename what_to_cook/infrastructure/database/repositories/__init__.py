"""Repository implementations for the What To Cook API.

Implements Repository pattern with Dependency Inversion principle.
"""

from what_to_cook.infrastructure.database.repositories.base import BaseRepository
from what_to_cook.infrastructure.database.repositories.recipes import RecipeRepository

__all__ = [
    "BaseRepository",
    "RecipeRepository",
]
