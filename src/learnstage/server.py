"""aiohttp server for Learnstage.

Application factory and route registration for standalone server mode.
"""

import logging

import httpx
from aiohttp import web

from learnstage.api.documents import create_documents_routes
from learnstage.api.routes import create_routes_routes
from learnstage.app_keys import renderer_key, revalidate_key, source_key
from learnstage.config import Config
from learnstage.content import create_source
from learnstage.core.renderer import DocumentRenderer

logger = logging.getLogger(__name__)

http_client_key = web.AppKey("http_client", httpx.AsyncClient)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application
    """
    app = web.Application()

    client = None
    if config.content.source == "graphql":
        client = httpx.AsyncClient()
        app[http_client_key] = client
        app.on_cleanup.append(_close_http_client)

    app[source_key] = create_source(config.content, client)
    app[renderer_key] = DocumentRenderer()
    app[revalidate_key] = config.server.revalidate

    app.router.add_routes(create_routes_routes())
    app.router.add_routes(create_documents_routes())

    return app


async def _close_http_client(app: web.Application) -> None:
    """Close the content API client on application cleanup."""
    await app[http_client_key].aclose()


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(f"Serving {config.content.source} content on {config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)
