"""Launch script that starts Uvicorn with the backend application."""

from __future__ import annotations

import logging
import os

import uvicorn

logger = logging.getLogger("llantera.launcher")


def main() -> None:
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    logger.debug("Starting backend on %s:%s", host, port)
    uvicorn.run("backend.main:app", host=host, port=port)


if __name__ == "__main__":
    main()
