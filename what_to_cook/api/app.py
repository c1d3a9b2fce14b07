"""FastAPI application factory for the What To Cook API."""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from what_to_cook import __version__
from what_to_cook.api.middleware import RateLimitGate, request_id_middleware
from what_to_cook.api.routes import recipes, system
from what_to_cook.config import RECIPES_PATH, Config
from what_to_cook.core.recipes.service import RecipeService
from what_to_cook.infrastructure.rate_limit import QuotaPolicy


def create_app(
    recipe_service: Optional[RecipeService] = None,
    quota_policy: Optional[QuotaPolicy] = None,
) -> FastAPI:
    """Create and configure FastAPI app. Factory pattern for testability."""
    app = FastAPI(
        title="what-to-cook",
        description=(
            "Turns a list of ingredients into a recipe using Gemini, stores it, "
            "and limits each browser session to a fixed number of recipes per window."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    policy = quota_policy or QuotaPolicy.from_config()
    app.state.quota_policy = policy
    if recipe_service is not None:
        app.state.recipe_service = recipe_service

    # Add middleware, innermost first: the gate must run inside the session
    app.add_middleware(RateLimitGate, policy=policy, path_prefix=RECIPES_PATH)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=Config.session_secret_key(),
        session_cookie=Config.session_cookie_name(),
        same_site="lax",
        https_only=Config.session_https_only(),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=Config.cors_allow_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
        max_age=3600,
    )

    # Register routes
    app.include_router(system.router)
    app.include_router(recipes.router)

    return app
