"""Image asset loading for export.

Sources may be data URIs, ``http(s)://`` URLs, ``file://`` URLs or paths
relative to a base directory.  Only PNG and JPEG are accepted; anything else
raises :class:`UnsupportedImageFormat` so the caller can skip the asset.
"""
from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote_to_bytes

import httpx
from PIL import Image, UnidentifiedImageError

from .config import FETCH_TIMEOUT

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
    "image/pjpeg": "JPEG",
}

# MIME types that say nothing about the payload; fall back to sniffing
_GENERIC_MIME_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[^;,]*)(?P<params>(?:;[^;,]*)*),(?P<payload>.*)$", re.DOTALL | re.IGNORECASE)


class AssetError(Exception):
    """An image could not be fetched or decoded."""


class UnsupportedImageFormat(AssetError):
    """The image is neither PNG nor JPEG."""


@dataclass(frozen=True)
class ImageAsset:
    data: bytes
    format: str  # "PNG" or "JPEG"
    width: int
    height: int

    @property
    def mime_type(self) -> str:
        return "image/png" if self.format == "PNG" else "image/jpeg"


def describe_source(source: str) -> str:
    """Short printable form of a source for log messages."""
    if source.startswith("data:"):
        return source[: source.find(",") + 1 if "," in source else 30] + "…"
    return source if len(source) <= 100 else source[:100] + "…"


def parse_data_uri(uri: str) -> Tuple[str, bytes]:
    """Split a data URI into ``(mime_type, payload_bytes)``."""
    match = _DATA_URI_RE.match(uri)
    if not match:
        raise AssetError("Malformed data URI")
    mime = match.group("mime").strip().lower()
    payload = match.group("payload")
    if ";base64" in match.group("params").lower():
        try:
            return mime, base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise AssetError(f"Invalid base64 payload in data URI: {exc}") from exc
    return mime, unquote_to_bytes(payload)


def detect_format(data: bytes, declared_mime: Optional[str] = None) -> Tuple[str, int, int]:
    """Identify PNG/JPEG *data* and return ``(format, width, height)``.

    A specific declared MIME type (from the data URI or the HTTP response)
    must be PNG or JPEG and must agree with the bytes.  Generic or missing
    MIME types fall back to sniffing the content.
    """
    declared = (declared_mime or "").split(";")[0].strip().lower()
    expected = None
    if declared not in _GENERIC_MIME_TYPES:
        expected = SUPPORTED_MIME_TYPES.get(declared)
        if expected is None:
            raise UnsupportedImageFormat(f"Unsupported image type {declared!r}")

    if not data:
        raise AssetError("Image is empty")
    try:
        with Image.open(io.BytesIO(data)) as img:
            actual = img.format
            width, height = img.size
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise AssetError(f"Cannot decode image: {exc}") from exc

    if actual not in ("PNG", "JPEG"):
        raise UnsupportedImageFormat(f"Unsupported image format {actual!r}")
    if expected is not None and expected != actual:
        raise AssetError(f"Declared {declared} but content is {actual}")
    return actual, width, height


class ImageLoader:
    """Resolve image sources to :class:`ImageAsset` objects.

    Use as an async context manager so the HTTP client is closed afterwards.
    An externally supplied *client* is never closed by the loader.
    """

    def __init__(
        self,
        *,
        base_dir: Optional[Path] = None,
        timeout: float = FETCH_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.timeout = timeout
        self._external_client = client
        self._client: Optional[httpx.AsyncClient] = client

    async def __aenter__(self) -> "ImageLoader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None and self._client is not self._external_client:
            await self._client.aclose()
        self._client = self._external_client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    async def load(self, source: str) -> ImageAsset:
        """Fetch/decode *source*.  Raises :class:`AssetError` on any failure."""
        if not source:
            raise AssetError("Empty image source")

        if source.startswith("data:"):
            mime, data = parse_data_uri(source)
        elif source.startswith(("http://", "https://")):
            mime, data = await self._fetch(source)
        else:
            mime, data = self._read_local(source)

        fmt, width, height = detect_format(data, mime)
        logger.debug("Loaded %s image %dx%d (%d bytes) from %s", fmt, width, height, len(data), describe_source(source))
        return ImageAsset(data=data, format=fmt, width=width, height=height)

    async def _fetch(self, url: str) -> Tuple[str, bytes]:
        try:
            # httpx timeouts apply per read; the deadline covers the whole transfer
            response = await asyncio.wait_for(self._get_client().get(url, timeout=self.timeout), self.timeout)
            response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise AssetError(f"Timed out after {self.timeout}s fetching {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise AssetError(f"HTTP {exc.response.status_code} fetching {url}") from exc
        except httpx.HTTPError as exc:
            raise AssetError(f"Network error fetching {url}: {exc}") from exc
        return response.headers.get("content-type", ""), response.content

    def _read_local(self, source: str) -> Tuple[str, bytes]:
        if source.startswith("file://"):
            path = Path(source[7:]).expanduser()
        else:
            path = Path(source).expanduser()
            if not path.is_absolute():
                path = self.base_dir / path
        try:
            data = path.resolve().read_bytes()
        except OSError as exc:
            raise AssetError(f"Cannot read image file {path}: {exc}") from exc
        mime, _ = mimetypes.guess_type(path.name)
        return mime or "", data
