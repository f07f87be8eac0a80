"""Run the API server.

Usage:
    python -m manifestpro
"""

import uvicorn

from manifestpro.config import settings


def main() -> None:
    uvicorn.run(
        "manifestpro.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
