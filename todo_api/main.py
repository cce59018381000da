"""
Todo API - Main entry point.

Runs the HTTP service with uvicorn using the configured host and port.
"""

from __future__ import annotations

import uvicorn

from todo_api.config import get_settings


def main():
    """Main entry point."""
    settings = get_settings()
    uvicorn.run(
        "todo_api.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
        reload=settings.debug and not settings.is_production,
    )


if __name__ == "__main__":
    main()
