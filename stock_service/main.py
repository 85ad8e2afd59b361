"""Main entry point for the API server."""

import sys

import uvicorn

from stock_service.api.app import create_app
from stock_service.config import configure_logging, get_settings

settings = get_settings()
configure_logging(settings.log_level)

app = create_app(settings)


def run(host: str, port: int) -> None:
    """Run the API with uvicorn after validating the port."""
    if not (1 <= port <= 65535):
        print(f"Error: Invalid PORT value '{port}'. Must be an integer between 1-65535.")
        sys.exit(1)

    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run(settings.host, settings.port)
