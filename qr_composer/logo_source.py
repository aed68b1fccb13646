"""Resolve a logo reference (local path or http(s) URL) to raw image bytes."""

import logging
import os
import re
from abc import ABC, abstractmethod
from http.client import HTTPException
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from qr_composer import __version__
from qr_composer.errors import LogoFetchError, LogoNotFoundError, LogoReadError

log = logging.getLogger(__name__)

_REMOTE_SCHEME = re.compile(r"^https?://", re.IGNORECASE)


def is_remote(source: str) -> bool:
    return bool(_REMOTE_SCHEME.match(source))


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class LogoSource(ABC):
    """Where the bytes of a logo image come from."""

    def __init__(self, source: str):
        self.source = source

    @abstractmethod
    def read(self) -> bytes:
        """Return the raw, still encoded, image bytes."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.source!r})"


# ---------------------------------------------------------------------------
# Local file
# ---------------------------------------------------------------------------

class LocalFileLogoSource(LogoSource):
    """A logo stored on the local filesystem. Never touches the network."""

    def read(self) -> bytes:
        if not os.path.isfile(self.source):
            log.error("Logo file not found: %s", self.source)
            raise LogoNotFoundError(f"Logo file not found: {self.source}")
        try:
            with open(self.source, "rb") as f:
                return f.read()
        except FileNotFoundError as e:
            log.error("Logo file disappeared before it could be read: %s", self.source)
            raise LogoNotFoundError(f"Logo file not found: {self.source}") from e
        except OSError as e:
            log.error("Logo file could not be read: %s (%s)", self.source, e)
            raise LogoReadError(f"Logo file could not be read: {self.source} ({e})") from e


# ---------------------------------------------------------------------------
# Remote URL
# ---------------------------------------------------------------------------

class HttpLogoSource(LogoSource):
    """A logo behind an http(s) URL, e.g. a Drive or CDN link.

    Performs one GET with no retries. ``timeout`` is left to the caller;
    ``None`` waits for as long as the socket does.
    """

    def __init__(self, source: str, timeout: float | None = None):
        super().__init__(source)
        self.timeout = timeout

    def read(self) -> bytes:
        kwargs = {} if self.timeout is None else {"timeout": self.timeout}
        try:
            request = Request(self.source, headers={"User-Agent": f"qr-composer/{__version__}"})
            with urlopen(request, **kwargs) as response:
                status = response.status
                if not 200 <= status < 300:
                    raise LogoFetchError(
                        f"Failed to fetch logo from URL: {self.source} (status {status})",
                        status=status,
                    )
                return response.read()
        except HTTPError as e:
            log.error("Logo fetch failed with status %s: %s", e.code, self.source)
            raise LogoFetchError(
                f"Failed to fetch logo from URL: {self.source} (status {e.code})",
                status=e.code,
            ) from e
        except (URLError, OSError, HTTPException, ValueError) as e:
            log.error("Logo fetch failed: %s (%s)", self.source, e)
            raise LogoFetchError(f"Failed to fetch logo from URL: {self.source} ({e})") from e


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def get_logo_source(source: str, timeout: float | None = None) -> LogoSource:
    """Pick the strategy for ``source`` by its scheme.

    Args:
        source: An ``http://``/``https://`` URL or a filesystem path.
        timeout: Socket timeout in seconds for remote sources.

    Returns:
        A ready-to-read LogoSource.
    """
    if is_remote(source):
        return HttpLogoSource(source, timeout=timeout)
    return LocalFileLogoSource(source)


def load_logo_bytes(source: str) -> bytes:
    """Default logo loader: read ``source`` with the matching strategy."""
    return get_logo_source(source).read()
