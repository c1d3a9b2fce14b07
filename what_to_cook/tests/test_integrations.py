"""Tests for the Gemini client wrapper and the Supabase recipe repository."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from google.api_core import exceptions as google_exceptions

from what_to_cook.core.errors import CreationError
from what_to_cook.core.execution import ErrorCategory
from what_to_cook.core.recipes.parser import RecipeAttributes
from what_to_cook.infrastructure.database import RecipeRecord, RecipeRepository
from what_to_cook.integrations.gemini import GeminiClient, GeminiError


class BlockedResponse:
    """Mimics a Gemini response whose text accessor fails on a safety block."""

    @property
    def text(self):
        raise ValueError("finish_reason: SAFETY")


@pytest.fixture
def gemini():
    with patch.object(GeminiClient, "_init_genai"):
        client = GeminiClient(api_key="test-key", model_name="gemini-test")
    client.genai = MagicMock()
    return client


def model_of(client):
    return client.genai.GenerativeModel.return_value


class TestGeminiClient:
    """Test GeminiClient error translation."""

    def test_requires_api_key(self, monkeypatch):
        """Test a missing key is reported at construction."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.delenv("GOOGLE_GENERATIVE_AI_API_KEY", raising=False)

        with pytest.raises(ValueError, match="Gemini API key required"):
            GeminiClient()

    @pytest.mark.asyncio
    async def test_generate_json(self, gemini):
        """Test JSON generation requests a JSON mime type and returns text."""
        model_of(gemini).generate_content.return_value = SimpleNamespace(text='{"title": "Soup"}')

        text = await gemini.generate_json("recipe please")

        assert text == '{"title": "Soup"}'
        gemini.genai.GenerativeModel.assert_called_once()
        assert gemini.genai.GenerativeModel.call_args.kwargs["model_name"] == "gemini-test"
        config = model_of(gemini).generate_content.call_args.kwargs["generation_config"]
        assert config["response_mime_type"] == "application/json"

    @pytest.mark.asyncio
    async def test_rate_limit_is_categorized(self, gemini):
        """Test provider throttling is tagged RATE_LIMIT."""
        model_of(gemini).generate_content.side_effect = google_exceptions.ResourceExhausted("quota")

        with pytest.raises(GeminiError) as exc_info:
            await gemini.generate_text("yes or no?")

        assert exc_info.value.category == ErrorCategory.RATE_LIMIT

    @pytest.mark.asyncio
    async def test_safety_block(self, gemini):
        """Test a blocked response raises a PERMANENT GeminiError."""
        model_of(gemini).generate_content.return_value = BlockedResponse()

        with pytest.raises(GeminiError, match="safety filters") as exc_info:
            await gemini.generate_text("yes or no?")

        assert exc_info.value.category == ErrorCategory.PERMANENT

    @pytest.mark.asyncio
    async def test_empty_text(self, gemini):
        """Test an empty response is an error."""
        model_of(gemini).generate_content.return_value = SimpleNamespace(text="")

        with pytest.raises(GeminiError, match="No content generated"):
            await gemini.generate_text("yes or no?")


def make_repository(configured=True, insert_data=None, select_data=None, insert_error=None):
    supabase = MagicMock()
    supabase.is_configured.return_value = configured
    table = supabase.client.table.return_value
    if insert_error is not None:
        table.insert.return_value.execute.side_effect = insert_error
    else:
        table.insert.return_value.execute.return_value = SimpleNamespace(data=insert_data or [])
    table.select.return_value.eq.return_value.limit.return_value.execute.return_value = (
        SimpleNamespace(data=select_data or [])
    )
    return RecipeRepository(client=supabase), supabase


ATTRIBUTES = RecipeAttributes(
    title="Soup",
    ingredients=["water", "salt"],
    instructions=["Boil the water", "Add the salt"],
)


class TestRecipeRepository:
    """Test RecipeRepository against a mocked Supabase client."""

    def test_create(self):
        """Test the row is inserted with newline-joined text columns."""
        row = {
            "id": 7,
            "title": "Soup",
            "ingredients": "water\nsalt",
            "instructions": "Boil the water\nAdd the salt",
            "created_at": "2024-01-01T00:00:00+00:00",
            "updated_at": "2024-01-01T00:00:00+00:00",
        }
        repository, supabase = make_repository(insert_data=[row])

        record = repository.create(ATTRIBUTES)

        supabase.client.table.assert_called_with("recipes")
        inserted = supabase.client.table.return_value.insert.call_args.args[0]
        assert inserted["ingredients"] == "water\nsalt"
        assert inserted["instructions"] == "Boil the water\nAdd the salt"
        assert record.id == 7
        assert record.to_dict()["instructions"] == ["Boil the water", "Add the salt"]

    def test_create_blank_fields(self):
        """Test blank columns are rejected before reaching the store."""
        repository, supabase = make_repository()

        with pytest.raises(CreationError, match="Title can't be blank, Ingredients can't be blank"):
            repository.create(RecipeAttributes(title=" ", ingredients=[], instructions=["Stir well"]))

        supabase.client.table.assert_not_called()

    def test_create_unconfigured(self):
        """Test an unconfigured store raises CreationError."""
        repository, _ = make_repository(configured=False)

        with pytest.raises(CreationError, match="not configured"):
            repository.create(ATTRIBUTES)

    def test_create_store_error(self):
        """Test insert failures become CreationError."""
        repository, _ = make_repository(insert_error=RuntimeError("connection reset"))

        with pytest.raises(CreationError, match="connection reset"):
            repository.create(ATTRIBUTES)

    def test_create_empty_result(self):
        """Test an insert that returns no row is a failure."""
        repository, _ = make_repository(insert_data=[])

        with pytest.raises(CreationError):
            repository.create(ATTRIBUTES)

    def test_get(self):
        """Test a row is returned as a RecipeRecord."""
        repository, _ = make_repository(
            select_data=[{"id": 3, "title": "Soup", "ingredients": "water", "instructions": "Boil"}]
        )

        record = repository.get(3)

        assert record == RecipeRecord(id=3, title="Soup", ingredients="water", instructions="Boil")

    def test_get_missing(self):
        """Test an unknown id returns None."""
        repository, _ = make_repository(select_data=[])
        assert repository.get(42) is None

    def test_get_unconfigured(self):
        """Test reads degrade to None when the store is not configured."""
        repository, _ = make_repository(configured=False)
        assert repository.get(1) is None
