"""Database module for the What To Cook API.

Provides Supabase client singleton and repository pattern for database operations.
"""

from what_to_cook.infrastructure.database.client import SupabaseClient
from what_to_cook.infrastructure.database.models import RecipeRecord
from what_to_cook.infrastructure.database.repositories import BaseRepository, RecipeRepository

__all__ = [
    "SupabaseClient",
    "RecipeRecord",
    "BaseRepository",
    "RecipeRepository",
]
