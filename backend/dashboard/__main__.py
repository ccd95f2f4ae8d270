"""
Entry point: `python -m dashboard` or the `dashboard` console script.

Listens on HOST:PORT (default 0.0.0.0:8080); everything else comes from the
environment through Settings.
"""

import uvicorn

from dashboard.config import settings


def main() -> None:
    uvicorn.run(
        "dashboard.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
