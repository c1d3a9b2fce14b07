"""Database models for the What To Cook API.

Type-safe dataclasses representing database records.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional


def split_lines(value: Optional[str]) -> List[str]:
    return [line for line in (value or "").split("\n") if line.strip()]


@dataclass
class RecipeRecord:
    """Represents a row in the recipes table.

    Ingredients and instructions are stored as newline-joined text.
    """

    id: Any
    title: str
    ingredients: str
    instructions: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for API responses, splitting text columns back into lists."""
        return {
            "id": self.id,
            "title": self.title,
            "ingredients": split_lines(self.ingredients),
            "instructions": split_lines(self.instructions),
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
