"""Exceptions raised while signing and verifying URLs."""


class SignedUrlError(Exception):
    """Base exception for signed URL failures."""


class InvalidReference(SignedUrlError, ValueError):
    """The URL is not absolute (missing scheme or host)."""


class ReservedParameterConflict(SignedUrlError, ValueError):
    """The URL already carries the reserved signature parameter."""


class SignatureRejected(SignedUrlError):
    """A signed URL failed verification or has expired."""
