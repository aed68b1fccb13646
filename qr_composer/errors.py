"""Exceptions raised by the QR composer.

Every error is surfaced to the caller; the composer never retries and never
falls back to a plain code on its own.
"""


class QRComposerError(Exception):
    """Base class for all composer errors."""


class InvalidOptionsError(QRComposerError, ValueError):
    """A colour, size, fraction or text option is malformed."""


class EncodingError(QRComposerError):
    """The QR encoder rejected the payload/options combination."""


class LogoError(QRComposerError):
    """The logo for a ``logo`` centre could not be used."""


class LogoNotFoundError(LogoError, FileNotFoundError):
    """A local logo path does not exist."""


class LogoFetchError(LogoError):
    """A remote logo URL failed: non-2xx status or network error."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class LogoDecodeError(LogoError):
    """The logo bytes are not a readable image."""


class LogoReadError(LogoError):
    """A local logo exists but cannot be read, e.g. permission denied."""
