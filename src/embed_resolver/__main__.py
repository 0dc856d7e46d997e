"""Entry point: ``python -m embed_resolver`` runs the HTTP server."""

import logging

import structlog
import uvicorn

from embed_resolver.config import settings


def configure_logging() -> None:
    """Configure structlog for the process."""
    renderer: structlog.types.Processor
    if settings.debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level.upper())
        ),
        cache_logger_on_first_use=True,
    )


def main() -> None:
    """Configure logging and start uvicorn."""
    configure_logging()
    uvicorn.run(
        "embed_resolver.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=settings.debug,
    )


if __name__ == "__main__":
    main()
