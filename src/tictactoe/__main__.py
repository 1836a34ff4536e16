"""Entry point for running the game via ``python -m tictactoe``."""

from __future__ import annotations

import logging
import os

import uvicorn

# Levels understood by both ``logging`` and uvicorn.
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
DEFAULT_LOG_LEVEL = "INFO"


def resolve_log_level(value: str | None) -> str:
    """Normalise a log level name, falling back to INFO for unknown values."""
    level = (value or DEFAULT_LOG_LEVEL).strip().upper()
    if level not in LOG_LEVELS:
        logging.getLogger(__name__).warning(
            "Unknown log level %r, using %s", value, DEFAULT_LOG_LEVEL
        )
        return DEFAULT_LOG_LEVEL
    return level


def main() -> None:
    """Start the FastAPI-powered tic-tac-toe web server."""

    host = os.environ.get("TICTACTOE_HOST", "0.0.0.0")
    port = int(os.environ.get("TICTACTOE_PORT", "8000"))
    log_level = resolve_log_level(os.environ.get("TICTACTOE_LOG_LEVEL"))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "tictactoe.ui:app",
        host=host,
        port=port,
        reload=False,
        log_level=log_level.lower(),
    )


if __name__ == "__main__":
    main()
