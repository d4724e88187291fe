"""Handlers for issuing signed links and serving the resources behind them."""

import datetime
import logging
import urllib.parse

from aiohttp import web
from mashumaro.exceptions import InvalidFieldValue, MissingField

from signedurl.config import SignerConfig
from signedurl.exceptions import SignedUrlError
from signedurl.middleware import public_route
from signedurl.server.models import (
    SignUrlRequest,
    SignUrlResponse,
    create_error_response,
)
from signedurl.url_signer import UrlSigner

logger = logging.getLogger(__name__)
routes = web.RouteTableDef()


@routes.get("/")
@public_route
async def handle_root(request: web.Request) -> web.Response:
    return web.Response(text="signedurl")


@routes.post("/api/sign")
@public_route
async def handle_sign(request: web.Request) -> web.Response:
    """Sign a path under the configured base URL.

    Body: {"path": "/files/report.pdf", "expiresIn": 60}
    """
    config: SignerConfig = request.app["config"]
    url_signer: UrlSigner = request.app["url_signer"]

    try:
        data = await request.json()
        if not isinstance(data, dict):
            raise ValueError("Expected a JSON object")
        # mashumaro coerces scalars, so check the raw JSON types first.
        if not isinstance(data.get("path"), str):
            raise ValueError("path must be a string")
        expires_in = data.get("expiresIn")
        if expires_in is not None and (
            not isinstance(expires_in, int) or isinstance(expires_in, bool)
        ):
            raise ValueError("expiresIn must be an integer")
        sign_request = SignUrlRequest.from_dict(data)
    except (ValueError, MissingField, InvalidFieldValue) as err:
        logger.info(f"Malformed sign request: {err}")
        return web.json_response(
            create_error_response("Malformed request").to_dict(), status=400
        )

    # Only paths on this server may be signed.
    if not sign_request.path.startswith("/") or sign_request.path.startswith("//"):
        return web.json_response(
            create_error_response("Path must be absolute").to_dict(), status=400
        )

    expires_in = sign_request.expires_in
    if expires_in is None:
        expires_in = config.default_expiration
    expiration = None
    if expires_in is not None:
        try:
            expiration = datetime.timedelta(seconds=expires_in)
        except OverflowError:
            return web.json_response(
                create_error_response("expiresIn out of range").to_dict(), status=400
            )

    url = urllib.parse.urljoin(config.base_url, sign_request.path)
    try:
        signed_url = url_signer.sign(url, expiration)
    except SignedUrlError as err:
        return web.json_response(create_error_response(str(err)).to_dict(), status=400)

    logger.info(f"Issued signed url for {sign_request.path}")
    return web.json_response(SignUrlResponse(url=signed_url).to_dict())


@routes.get("/files/{name}")
async def handle_file(request: web.Request) -> web.Response:
    """Serve a resource. Only reachable through a signed URL."""
    name = request.match_info["name"]
    return web.Response(text=f"Contents of {name}")
