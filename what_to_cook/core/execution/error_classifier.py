"""Error classifier for the What To Cook API.

Classifies upstream and pipeline errors into categories and HTTP status codes.
"""

import asyncio
from enum import Enum

from google.api_core import exceptions as google_exceptions

from what_to_cook.core.errors import (
    CreationError,
    GenerationError,
    IngredientsError,
    ParsingError,
    RecipeError,
    RecipeValidationError,
    UpstreamRateLimitError,
)


class ErrorCategory(str, Enum):
    """Error categories for upstream API failures.

    - TRANSIENT: Temporary errors (network timeouts, service unavailable)
    - RATE_LIMIT: Rate limiting errors (429 from the provider)
    - PERMANENT: Permanent errors (400, 401, 404, invalid params)
    - UNKNOWN: Unknown errors
    """

    TRANSIENT = "transient"
    RATE_LIMIT = "rate_limit"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


# Most specific classes first; UpstreamRateLimitError subclasses GenerationError.
_STATUS_BY_ERROR = (
    (UpstreamRateLimitError, 429),
    (GenerationError, 503),
    (IngredientsError, 422),
    (ParsingError, 422),
    (RecipeValidationError, 422),
    (CreationError, 422),
)


class ErrorClassifier:
    """Classifies errors into categories and response status codes.

    Static methods for stateless classification.
    """

    @staticmethod
    def categorize(error: Exception) -> ErrorCategory:
        """Categorize an upstream error into TRANSIENT, RATE_LIMIT, PERMANENT, or UNKNOWN.

        Args:
            error: Exception raised by the language model client

        Returns:
            ErrorCategory enum value
        """
        if isinstance(error, (google_exceptions.ResourceExhausted, google_exceptions.TooManyRequests)):
            return ErrorCategory.RATE_LIMIT

        if isinstance(
            error,
            (
                asyncio.TimeoutError,
                google_exceptions.ServiceUnavailable,
                google_exceptions.DeadlineExceeded,
                google_exceptions.InternalServerError,
                ConnectionError,
            ),
        ):
            return ErrorCategory.TRANSIENT

        if isinstance(error, google_exceptions.ClientError):
            return ErrorCategory.PERMANENT

        error_str = str(error).lower()

        if "429" in error_str or "rate limit" in error_str or "quota" in error_str:
            return ErrorCategory.RATE_LIMIT

        if "timeout" in error_str or "timed out" in error_str:
            return ErrorCategory.TRANSIENT

        if isinstance(error, ValueError):
            return ErrorCategory.PERMANENT

        return ErrorCategory.UNKNOWN

    @staticmethod
    def status_for(error: Exception) -> int:
        """Map a recipe pipeline error to the HTTP status returned to the client.

        Args:
            error: Exception raised while creating a recipe

        Returns:
            HTTP status code; 500 for anything outside the recipe error taxonomy
        """
        for error_type, status_code in _STATUS_BY_ERROR:
            if isinstance(error, error_type):
                return status_code
        if isinstance(error, RecipeError):
            return 422
        return 500
