"""Byte sources: where the content of an inspected file comes from.

The inspection engine never touches the filesystem or the network itself;
it asks a :class:`ByteSource` for the full content.  Failing to obtain that
content is the only error that aborts an inspection, and is reported as
:class:`SourceUnavailableError` with a machine-readable ``code``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import unquote, urlparse

import requests
from requests.exceptions import ConnectionError, RequestException, Timeout

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: int = 30
DEFAULT_MAX_BYTES: int = 512 * 1024 * 1024

_CHUNK_SIZE = 64 * 1024


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SourceError(Exception):
    """Base class for byte-source failures."""


class SourceUnavailableError(SourceError):
    """Raised when a source cannot supply its content."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


# ---------------------------------------------------------------------------
# Sources
# ---------------------------------------------------------------------------


class ByteSource(Protocol):
    """Anything that can name a file and produce its bytes."""

    @property
    def name(self) -> str: ...

    def read(self) -> bytes: ...


@dataclass(frozen=True)
class MemorySource:
    """Content already held in memory."""

    name: str
    data: bytes

    def read(self) -> bytes:
        return self.data


class FileSource:
    """A file on the local filesystem.

    :param path: Path to the file.
    :param max_bytes: Refuse files larger than this.
    """

    def __init__(self, path: str, *, max_bytes: int = DEFAULT_MAX_BYTES) -> None:
        self.path = path
        self.max_bytes = max_bytes

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def read(self) -> bytes:
        if not os.path.isfile(self.path):
            raise SourceUnavailableError("FILE_NOT_FOUND", f"File not found: {self.path}")
        try:
            size = os.path.getsize(self.path)
            if size > self.max_bytes:
                raise SourceUnavailableError(
                    "FILE_TOO_LARGE",
                    f"File is {size} bytes, limit is {self.max_bytes}: {self.path}",
                )
            with open(self.path, "rb") as fh:
                return fh.read()
        except OSError as exc:
            raise SourceUnavailableError("READ_ERROR", f"Could not read {self.path}: {exc}") from exc


class HttpSource:
    """A file downloaded over HTTP(S).

    The body is streamed so that oversized downloads are abandoned early
    instead of being buffered in full.

    :param url: Location of the file.
    :param timeout: Request timeout in seconds.
    :param max_bytes: Abort downloads larger than this.
    :param session: Optional pre-configured :class:`requests.Session`.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_bytes: int = DEFAULT_MAX_BYTES,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.max_bytes = max_bytes
        self._session = session or requests.Session()

    @property
    def name(self) -> str:
        path = unquote(urlparse(self.url).path)
        return path.rstrip("/").rsplit("/", 1)[-1]

    def read(self) -> bytes:
        logger.debug("Downloading %s", self.url)
        try:
            with self._session.get(self.url, timeout=self.timeout, stream=True) as response:
                if not response.ok:
                    raise SourceUnavailableError(
                        "HTTP_ERROR",
                        f"HTTP {response.status_code} while fetching {self.url}",
                    )
                buf = bytearray()
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    buf.extend(chunk)
                    if len(buf) > self.max_bytes:
                        raise SourceUnavailableError(
                            "FILE_TOO_LARGE",
                            f"Download exceeds {self.max_bytes} bytes: {self.url}",
                        )
                return bytes(buf)
        except Timeout as exc:
            raise SourceUnavailableError("TIMEOUT", f"Timed out fetching {self.url}") from exc
        except ConnectionError as exc:
            raise SourceUnavailableError(
                "CONNECTION_ERROR", f"Could not connect to {self.url}: {exc}"
            ) from exc
        except RequestException as exc:
            raise SourceUnavailableError("READ_ERROR", f"Could not fetch {self.url}: {exc}") from exc


def source_for(
    location: str,
    *,
    timeout: int = DEFAULT_TIMEOUT,
    max_bytes: int = DEFAULT_MAX_BYTES,
) -> ByteSource:
    """Pick a source for *location*: a URL or a filesystem path."""
    if location.lower().startswith(("http://", "https://")):
        return HttpSource(location, timeout=timeout, max_bytes=max_bytes)
    return FileSource(location, max_bytes=max_bytes)
