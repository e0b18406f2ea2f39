"""
Run the command bridge on the loopback interface.

Usage:
    python -m sqd_assistant
"""
from __future__ import annotations

import uvicorn

from .main import create_app
from .settings import get_settings


def main() -> None:
    settings = get_settings()
    app = create_app(settings)
    # Logging is configured by the app lifespan; keep uvicorn from replacing it.
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None, access_log=False)


if __name__ == "__main__":
    main()
