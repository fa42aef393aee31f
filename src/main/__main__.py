"""
Main module entry point.

Runs the HTTP service with uvicorn: ``python -m src.main``.
"""

import uvicorn

from src.main.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "src.main.app:app",
        host=settings.service.host,
        port=settings.service.port,
        reload=settings.service.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
