"""Main entry point for the What To Cook API.

Usage:
    Development: uvicorn what_to_cook.main:app --reload --port 8000
    Production: uvicorn what_to_cook.main:app --host 0.0.0.0 --port 8000 --workers 4
"""

from what_to_cook.api import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "what_to_cook.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
