import logging

from aiohttp import web

from signedurl.config import SignerConfig
from signedurl.middleware import signed_url_middleware
from signedurl.url_signer import UrlSigner

from .routes import files

logger = logging.getLogger(__name__)


def create_app(config: SignerConfig) -> web.Application:
    app = web.Application(
        middlewares=[signed_url_middleware(config.base_url, config.key)]
    )

    app["config"] = config
    app["url_signer"] = UrlSigner(config.key)

    app.add_routes(files.routes)
    return app


def run(config: SignerConfig) -> None:
    logger.info(f"Serving signed urls for {config.base_url}")
    web.run_app(create_app(config), host=config.host, port=config.port)
