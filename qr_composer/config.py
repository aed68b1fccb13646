"""Environment-backed settings for hosts of the composer (CLI, web layer).

The composer itself never reads these; callers resolve them once at
startup and pass concrete values in.
"""

import os
from dataclasses import dataclass

from qr_composer.errors import InvalidOptionsError
from qr_composer.logo_source import is_remote

UPLOADS_PREFIX = "/uploads/logos/"


@dataclass(frozen=True)
class Settings:
    """Deployment settings.

    Attributes:
        uploads_root: Directory holding the ``uploads/`` tree that stored
            ``/uploads/logos/<file>`` references point into.
        fetch_timeout: Seconds to wait on remote logo fetches, or None.
        frontend_url: Public base URL of the invitation/album pages.
    """

    uploads_root: str = "."
    fetch_timeout: float | None = None
    frontend_url: str = "http://localhost:3000"

    @classmethod
    def from_env(cls, environ=None) -> "Settings":
        environ = os.environ if environ is None else environ
        timeout = environ.get("QR_COMPOSER_FETCH_TIMEOUT")
        if timeout:
            try:
                fetch_timeout = float(timeout)
            except ValueError as e:
                raise InvalidOptionsError(
                    f"QR_COMPOSER_FETCH_TIMEOUT must be a number of seconds, got {timeout!r}"
                ) from e
        else:
            fetch_timeout = None
        return cls(
            uploads_root=environ.get("QR_COMPOSER_UPLOADS_ROOT", "."),
            fetch_timeout=fetch_timeout,
            frontend_url=environ.get("QR_COMPOSER_FRONTEND_URL", "http://localhost:3000").rstrip("/"),
        )

    def resolve_logo_reference(self, reference: str) -> str:
        """Map a stored logo reference to a concrete path or URL.

        ``/uploads/logos/<file>`` becomes ``<uploads_root>/uploads/logos/<file>``;
        URLs and other paths are returned unchanged.
        """
        if is_remote(reference) or not reference.startswith(UPLOADS_PREFIX):
            return reference
        return os.path.join(self.uploads_root, reference.lstrip("/"))

    def invitation_url(self, qr_code_id: str) -> str:
        return f"{self.frontend_url}/invitation/{qr_code_id}"

    def album_url(self, qr_code_id: str) -> str:
        return f"{self.frontend_url}/album/{qr_code_id}"
