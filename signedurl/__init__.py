"""Tamper-evident, optionally expiring signed URLs."""

from .exceptions import (
    InvalidReference,
    ReservedParameterConflict,
    SignatureRejected,
    SignedUrlError,
)
from .middleware import public_route, require_signature, signed_url_middleware
from .url_signer import (
    UrlSigner,
    canonicalize,
    expired,
    sign,
    sign_with_expiration,
    valid_signature,
)

__all__ = [
    "InvalidReference",
    "ReservedParameterConflict",
    "SignatureRejected",
    "SignedUrlError",
    "UrlSigner",
    "canonicalize",
    "public_route",
    "expired",
    "require_signature",
    "sign",
    "sign_with_expiration",
    "signed_url_middleware",
    "valid_signature",
]
