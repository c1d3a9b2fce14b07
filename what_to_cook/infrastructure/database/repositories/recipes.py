"""Recipe repository for the What To Cook API.

Persists generated recipes and reads them back by id.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from what_to_cook.core.errors import CreationError
from what_to_cook.core.logging import logger
from what_to_cook.core.recipes.parser import RecipeAttributes
from what_to_cook.infrastructure.database.models import RecipeRecord
from what_to_cook.infrastructure.database.repositories.base import BaseRepository


class RecipeRepository(BaseRepository[RecipeRecord]):
    """Repository for the recipes table."""

    def table_name(self) -> str:
        """Return table name."""
        return "recipes"

    def create(self, attributes: RecipeAttributes) -> RecipeRecord:
        """Insert a recipe.

        Args:
            attributes: Validated recipe content

        Returns:
            The stored RecipeRecord

        Raises:
            CreationError: If a field is blank, Supabase is not configured, or the insert fails
        """
        row = {
            "title": attributes.title.strip(),
            "ingredients": "\n".join(attributes.ingredients).strip(),
            "instructions": "\n".join(attributes.instructions).strip(),
        }
        blank = [field for field, value in row.items() if not value]
        if blank:
            raise CreationError(
                ", ".join(f"{field.capitalize()} can't be blank" for field in blank)
            )

        if not self._client.is_configured():
            logger.error("recipe_create_failed", reason="Supabase not configured")
            raise CreationError("Recipe store is not configured")

        now = datetime.now(timezone.utc).isoformat()
        row["created_at"] = now
        row["updated_at"] = now

        try:
            result = self.db.table(self.table_name()).insert(row).execute()
        except Exception as e:
            logger.error("recipe_create_failed", error=str(e))
            raise CreationError(f"Failed to save recipe: {str(e)}") from e

        if not result.data:
            logger.error("recipe_create_failed", reason="empty insert result")
            raise CreationError("Failed to save recipe")

        logger.info("recipe_saved", recipe_id=result.data[0].get("id"))
        return self._row_to_model(result.data[0])

    def get(self, recipe_id: Any) -> Optional[RecipeRecord]:
        """Get a recipe by id, or None if it does not exist or the store is unavailable."""
        try:
            if not self._client.is_configured():
                logger.warning("recipe_get_skipped", reason="Supabase not configured")
                return None

            result = (
                self.db.table(self.table_name())
                .select("*")
                .eq("id", recipe_id)
                .limit(1)
                .execute()
            )

            if not result.data:
                return None

            return self._row_to_model(result.data[0])

        except Exception as e:
            logger.error("recipe_get_failed", recipe_id=recipe_id, error=str(e))
            return None

    def _row_to_model(self, row: Dict[str, Any]) -> RecipeRecord:
        """Convert database row to RecipeRecord."""
        return RecipeRecord(
            id=row.get("id"),
            title=row.get("title", ""),
            ingredients=row.get("ingredients", ""),
            instructions=row.get("instructions", ""),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )
