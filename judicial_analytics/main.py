"""Uvicorn entry point for the judicial analytics API.

Run directly:        python -m judicial_analytics.main
Run via uvicorn:     uvicorn judicial_analytics.main:app --reload
"""

import uvicorn

from judicial_analytics.api.app import create_app
from judicial_analytics.core.config import Settings

app = create_app()


def main() -> None:
    """Start the API server with uvicorn."""
    settings = Settings()
    uvicorn.run(
        "judicial_analytics.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
