"""Gemini AI client for the What To Cook API.

Provides the chat-completion calls used by the recipe generator.
"""

import asyncio
from typing import Any, Dict, Optional

from what_to_cook.config import Config
from what_to_cook.core.execution import ErrorCategory, ErrorClassifier


class GeminiError(RuntimeError):
    """Gemini call failed; category tells throttling apart from other failures."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN):
        super().__init__(message)
        self.category = category


class GeminiClient:
    """Gemini client for plain text and JSON generation.

    Singleton-like pattern to avoid recreating clients.
    """

    _instance: Optional["GeminiClient"] = None
    _lock = asyncio.Lock()

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        """Initialize Gemini client.

        Args:
            api_key: Optional API key. If not provided, reads from environment.
            model_name: Optional model override. Defaults to GEMINI_MODEL.

        Raises:
            ValueError: If API key not found in environment
        """
        if api_key is None:
            api_key = Config.gemini_api_key()

        if not api_key:
            raise ValueError(
                "Gemini API key required. Set GOOGLE_GENERATIVE_AI_API_KEY or GEMINI_API_KEY environment variable."
            )

        self.api_key = api_key
        self.model_name = model_name or Config.gemini_model()
        self.safety_settings = [
            {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_ONLY_HIGH"},
            {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_ONLY_HIGH"},
            {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_ONLY_HIGH"},
            {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_ONLY_HIGH"},
        ]
        self._init_genai()

    def _init_genai(self) -> None:
        """Initialize Google Generative AI client.

        Raises:
            RuntimeError: If Gemini client initialization fails
        """
        try:
            import google.generativeai as genai
            genai.configure(api_key=self.api_key)
            self.genai = genai
        except Exception as e:
            raise RuntimeError(f"Failed to initialize Gemini client: {str(e)}")

    @classmethod
    async def get_instance(cls, api_key: Optional[str] = None) -> "GeminiClient":
        """Get or create singleton instance with lazy API key loading."""
        async with cls._lock:
            if cls._instance is None:
                cls._instance = cls(api_key)
            return cls._instance

    async def _generate(self, prompt: str, generation_config: Dict[str, Any]) -> str:
        model = self.genai.GenerativeModel(
            model_name=self.model_name,
            safety_settings=self.safety_settings,
        )
        try:
            response = await asyncio.to_thread(
                model.generate_content,
                prompt,
                generation_config=generation_config,
            )
        except Exception as e:
            raise GeminiError(
                f"Gemini generation failed: {str(e)}",
                category=ErrorClassifier.categorize(e),
            ) from e

        # Safety blocks leave the response without text
        try:
            text = response.text
        except ValueError as e:
            raise GeminiError(
                "Content generation blocked by safety filters.",
                category=ErrorCategory.PERMANENT,
            ) from e

        if not text:
            raise GeminiError("No content generated.", category=ErrorCategory.UNKNOWN)
        return text

    async def generate_text(
        self, prompt: str, temperature: float = 0.7, max_tokens: int = 512
    ) -> str:
        """Generate plain text.

        Args:
            prompt: User prompt
            temperature: Generation temperature (0.0-1.0)
            max_tokens: Maximum tokens to generate

        Returns:
            Generated text string

        Raises:
            GeminiError: If generation fails or is blocked
        """
        return await self._generate(
            prompt,
            {"temperature": temperature, "max_output_tokens": max_tokens},
        )

    async def generate_json(
        self, prompt: str, temperature: float = 0.7, max_tokens: int = 2048
    ) -> str:
        """Generate a JSON document (returned as text, not parsed).

        Raises:
            GeminiError: If generation fails or is blocked
        """
        return await self._generate(
            prompt,
            {
                "temperature": temperature,
                "max_output_tokens": max_tokens,
                "response_mime_type": "application/json",
            },
        )
