"""Access gate that only lets through requests for validly signed URLs."""

import functools
import logging
import urllib.parse
from typing import Awaitable, Callable

from aiohttp import web

from .exceptions import InvalidReference
from .url_signer import SIGNATURE_PARAM, expired, valid_signature

logger = logging.getLogger(__name__)

__all__ = [
    "check_request",
    "public_route",
    "require_signature",
    "signed_url_middleware",
]

FORBIDDEN_TEXT = "403 Forbidden"
INTERNAL_ERROR_TEXT = "Internal Server Error"

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]
Middleware = Callable[[web.Request, Handler], Awaitable[web.StreamResponse]]


def _forbidden() -> web.Response:
    # The body never says which check failed.
    return web.Response(status=403, text=FORBIDDEN_TEXT)


def check_request(
    request: web.Request, base_url: str, key: bytes
) -> web.Response | None:
    """Decide whether a request carries a valid, unexpired signed URL.

    The request target is resolved against `base_url` before verification so that
    the signature covers the public scheme and host the URL was issued for.

    Returns:
        A rejection response, or None when the request may proceed.
    """
    if SIGNATURE_PARAM not in request.query:
        logger.info(f"Rejected {request.path}: missing signature")
        return _forbidden()

    target = urllib.parse.urljoin(base_url, request.raw_path)
    try:
        valid = valid_signature(target, key)
    except InvalidReference as err:
        logger.error(f"Unable to verify {request.path} against {base_url!r}: {err}")
        return web.Response(status=500, text=INTERNAL_ERROR_TEXT)
    if not valid:
        logger.info(f"Rejected {request.path}: invalid signature")
        return _forbidden()

    if expired(target):
        logger.info(f"Rejected {request.path}: signature expired")
        return _forbidden()

    return None


def public_route(handler: Handler) -> Handler:
    """Mark a route handler as reachable without a signed URL."""
    handler.is_public = True  # type: ignore[attr-defined]
    return handler


def require_signature(base_url: str, key: bytes) -> Callable[[Handler], Handler]:
    """Decorator requiring a signed URL to reach a single route handler."""

    def decorator(handler: Handler) -> Handler:
        @functools.wraps(handler)
        async def wrapper(request: web.Request) -> web.StreamResponse:
            rejection = check_request(request, base_url, key)
            if rejection is not None:
                return rejection
            return await handler(request)

        return wrapper

    return decorator


def signed_url_middleware(base_url: str, key: bytes) -> Middleware:
    """Create a middleware requiring signed URLs for every non-public route.

    Handlers marked with `public_route` are passed through unchecked.
    """

    @web.middleware
    async def middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
        if getattr(handler, "is_public", False):
            return await handler(request)
        rejection = check_request(request, base_url, key)
        if rejection is not None:
            return rejection
        return await handler(request)

    return middleware
