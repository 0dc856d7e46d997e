"""
Starlette ASGI application exposing the oEmbed-style resolve endpoint.
"""

import contextlib
from collections.abc import AsyncIterator

import structlog
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from embed_resolver import __version__
from embed_resolver.config import settings
from embed_resolver.exceptions import (
    ProviderNotConfiguredError,
    ResolutionError,
    UnsupportedFormatError,
    UpstreamUnavailableError,
    ValidationError,
)
from embed_resolver.service import MetadataService, create_http_client
from embed_resolver.writers.json_writer import JsonResponseWriter
from embed_resolver.writers.xml_writer import XmlResponseWriter

logger = structlog.get_logger(__name__)

CONTENT_TYPES = {
    "json": f"{JsonResponseWriter.content_type}; charset=utf-8",
    "xml": f"{XmlResponseWriter.content_type}; charset=utf-8",
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


async def root(_request: Request) -> JSONResponse:
    """Root endpoint with server information."""
    return JSONResponse(
        {
            "name": "Embed Resolver",
            "version": __version__,
            "description": "Resolves URLs into normalized embed metadata",
            "endpoints": {
                "oembed": "/oembed?url=<url>&format=json|xml",
                "health": "/health",
            },
        }
    )


async def health_check(request: Request) -> JSONResponse:
    """Liveness endpoint listing the configured providers."""
    service: MetadataService = request.app.state.service
    return JSONResponse({"healthy": True, **service.registry.get_status()})


async def oembed(request: Request) -> Response:
    """
    Resolve ``url`` and return the embed as JSON or XML.

    Status codes follow the oEmbed convention: 404 when nothing can be
    embedded, 501 for an unsupported format.
    """
    service: MetadataService = request.app.state.service
    url = request.query_params.get("url")
    format = request.query_params.get("format", settings.default_format).lower()

    if not url:
        return _error(400, "Missing required parameter: url")

    try:
        body = await service.render(url, format)
    except UnsupportedFormatError as e:
        return _error(501, str(e))
    except ValidationError as e:
        return _error(400, str(e))
    except UpstreamUnavailableError as e:
        logger.warning("upstream_unavailable", url=url, status_code=e.status_code, error=str(e))
        return _error(502, str(e))
    except ResolutionError as e:
        return _error(404, str(e))
    except ProviderNotConfiguredError as e:
        return _error(503, str(e))

    return Response(content=body, media_type=CONTENT_TYPES[format])


def create_app(service: MetadataService | None = None) -> Starlette:
    """
    Build the ASGI application.

    Args:
        service: Pre-built service (the lifespan creates one when omitted)
    """

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        logger.info(
            "starting_http_server",
            host=settings.host,
            port=settings.port,
            debug=settings.debug,
        )
        if service is not None:
            app.state.service = service
            yield
        else:
            async with create_http_client(settings) as http_client:
                app.state.service = MetadataService(http_client, config=settings)
                logger.info(
                    "providers_initialized",
                    available=app.state.service.registry.available_providers,
                )
                yield
                await app.state.service.cache.close()
        logger.info("http_server_shutdown")

    return Starlette(
        debug=settings.debug,
        routes=[
            Route("/", root, methods=["GET"]),
            Route("/health", health_check, methods=["GET"]),
            Route("/oembed", oembed, methods=["GET"]),
        ],
        lifespan=lifespan,
    )


app = create_app()
