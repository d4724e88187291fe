"""URL Signing Utility.

This module provides helpers for generating and verifying HMAC-SHA256 signatures
carried in the query string of absolute URLs.

A signed URL carries its signature in the reserved `signature` query parameter and,
optionally, an expiration instant in the reserved `expires` parameter (Unix seconds).
The signature covers the scheme, host, path and every other query parameter. Query
parameters are sorted by name before signing so that reordering them does not
invalidate the signature.
"""

import binascii
import datetime
import hashlib
import hmac
import logging
import re
import time
import urllib.parse
from dataclasses import dataclass, field

from .exceptions import InvalidReference, ReservedParameterConflict, SignatureRejected

logger = logging.getLogger(__name__)

__all__ = [
    "SIGNATURE_PARAM",
    "EXPIRES_PARAM",
    "canonicalize",
    "sign",
    "sign_with_expiration",
    "valid_signature",
    "expired",
    "UrlSigner",
]

SIGNATURE_PARAM = "signature"
EXPIRES_PARAM = "expires"

_INT64_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

Expiration = datetime.datetime | int | None


def _split_absolute(url: str) -> urllib.parse.SplitResult:
    """Split a URL, requiring an explicit scheme and host."""
    try:
        parts = urllib.parse.urlsplit(url)
    except ValueError as err:
        raise InvalidReference(f"Unable to parse url: {err}") from err
    if not parts.scheme or not parts.netloc:
        raise InvalidReference("Only absolute urls can be signed")
    return parts


def _parse_query(query: str) -> list[tuple[str, str]]:
    # surrogateescape keeps bytes that are not valid UTF-8 distinct.
    return urllib.parse.parse_qsl(
        query, keep_blank_values=True, errors="surrogateescape"
    )


def _encode_query(params: list[tuple[str, str]]) -> str:
    # Stable sort: values sharing a name keep their relative order.
    return urllib.parse.urlencode(
        sorted(params, key=lambda item: item[0]), errors="surrogateescape"
    )


def _unix_seconds(expires_at: datetime.datetime | int) -> int:
    if isinstance(expires_at, datetime.datetime):
        return int(expires_at.timestamp())
    return int(expires_at)


@dataclass
class Message:
    """The canonical content covered by a URL signature."""

    scheme: str
    netloc: str
    path: str
    params: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_url(cls, url: str) -> "Message":
        """Build a message from an absolute URL, dropping any signature parameter."""
        parts = _split_absolute(url)
        params = [
            (name, value)
            for name, value in _parse_query(parts.query)
            if name != SIGNATURE_PARAM
        ]
        return cls(parts.scheme, parts.netloc, parts.path, params)

    def encode(self) -> str:
        """Encode the message into its canonical string."""
        return urllib.parse.urlunsplit(
            (self.scheme, self.netloc, self.path, _encode_query(self.params), "")
        )

    def digest(self, secret_key: bytes) -> bytes:
        """Compute the raw HMAC-SHA256 of the canonical string."""
        return hmac.new(
            secret_key, self.encode().encode("utf-8"), hashlib.sha256
        ).digest()

    def sign(self, secret_key: bytes) -> str:
        """Generate the hex signature for the message."""
        return self.digest(secret_key).hex()


def canonicalize(url: str) -> str:
    """Return the canonical string used as the MAC input for a URL.

    Raises:
        InvalidReference: If the URL lacks a scheme or host.
    """
    return Message.from_url(url).encode()


def sign(url: str, key: bytes) -> str:
    """Sign an absolute URL that never expires."""
    return sign_with_expiration(url, None, key)


def sign_with_expiration(url: str, expires_at: Expiration, key: bytes) -> str:
    """Sign an absolute URL, optionally embedding an expiration instant.

    Args:
        url: The absolute URL to sign.
        expires_at: A datetime or Unix timestamp (seconds) after which the URL is
            considered expired, or None for no expiration.
        key: The shared secret key.

    Returns:
        The signed URL, its query (signature included) sorted by name.

    Raises:
        InvalidReference: If the URL lacks a scheme or host.
        ReservedParameterConflict: If the URL already has a signature parameter.
    """
    parts = _split_absolute(url)
    params = _parse_query(parts.query)
    if any(name == SIGNATURE_PARAM for name, _ in params):
        raise ReservedParameterConflict(
            f"{SIGNATURE_PARAM} is a reserved query parameter"
        )
    if expires_at is not None:
        params = [(name, value) for name, value in params if name != EXPIRES_PARAM]
        params.append((EXPIRES_PARAM, str(_unix_seconds(expires_at))))

    message = Message(parts.scheme, parts.netloc, parts.path, params)
    signature = message.sign(key)

    signed_query = _encode_query(params + [(SIGNATURE_PARAM, signature)])
    return urllib.parse.urlunsplit(
        (parts.scheme, parts.netloc, parts.path, signed_query, parts.fragment)
    )


def valid_signature(url: str, key: bytes) -> bool:
    """Check whether the signature carried by a URL matches its content.

    A missing, malformed or mismatched signature is reported as False rather than
    raised. Expiration is not checked here, see `expired`.

    Raises:
        InvalidReference: If the URL lacks a scheme or host.
    """
    message = Message.from_url(url)
    received = ""
    for name, value in _parse_query(urllib.parse.urlsplit(url).query):
        if name == SIGNATURE_PARAM:
            received = value
            break

    try:
        received_mac = binascii.unhexlify(received)
    except ValueError:
        logger.debug("Signature is not valid hex")
        return False

    return hmac.compare_digest(received_mac, message.digest(key))


def expired(url: str) -> bool:
    """Check whether the expiration carried by a URL has passed.

    URLs without an `expires` parameter never expire. A value that is not a base-10
    64-bit integer is treated as expired.
    """
    value = ""
    for name, param in _parse_query(urllib.parse.urlsplit(url).query):
        if name == EXPIRES_PARAM:
            value = param
            break
    if not value:
        return False

    if not _INT64_RE.fullmatch(value):
        logger.debug(f"Malformed expiration: {value!r}")
        return True
    expires_at = int(value)
    if not _INT64_MIN <= expires_at <= _INT64_MAX:
        logger.debug(f"Expiration out of range: {value!r}")
        return True

    return expires_at < time.time()


class UrlSigner:
    """Helper for signing and verifying URLs with a single secret key."""

    def __init__(self, secret_key: str | bytes) -> None:
        """Initialize with a secret key.

        Args:
            secret_key: The secret key used for HMAC generation.
        """
        if not secret_key:
            raise ValueError("Secret key cannot be empty")
        if isinstance(secret_key, str):
            secret_key = secret_key.encode("utf-8")
        self.secret_key = secret_key

    def sign(self, url: str, expiration: datetime.timedelta | None = None) -> str:
        """Sign a URL, optionally valid only for the given duration from now."""
        if expiration is None:
            return sign(url, self.secret_key)
        expires_at = int(time.time() + expiration.total_seconds())
        return sign_with_expiration(url, expires_at, self.secret_key)

    def sign_with_expiration(self, url: str, expires_at: Expiration) -> str:
        """Sign a URL that expires at an absolute instant."""
        return sign_with_expiration(url, expires_at, self.secret_key)

    def valid_signature(self, url: str) -> bool:
        """Check only the signature of a URL."""
        return valid_signature(url, self.secret_key)

    def verify(self, url: str) -> None:
        """Verify both the signature and the expiration of a URL.

        Raises:
            InvalidReference: If the URL lacks a scheme or host.
            SignatureRejected: If the signature is invalid or the URL has expired.
        """
        if not valid_signature(url, self.secret_key):
            raise SignatureRejected("Invalid signature")
        if expired(url):
            raise SignatureRejected("Signature expired")
