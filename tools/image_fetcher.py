"""Tools for fetching shopper images referenced by URL."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlparse

import requests

from tools.observability import instrument_tool

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024
_CHUNK_SIZE = 64 * 1024


class InvalidImageURLError(ValueError):
    """Raised when the provided URL is not a valid HTTP or HTTPS URL."""


class ImageFetchError(RuntimeError):
    """Raised when the image cannot be retrieved successfully."""


def _validate_url(url: str) -> None:
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise InvalidImageURLError(f"Unsupported or invalid URL: {url}")


@instrument_tool("fetch_image")
def fetch_image(url: str, timeout: Optional[float] = 10.0, max_bytes: int = MAX_IMAGE_BYTES) -> bytes:
    """Fetch raw image bytes from a remote URL.

    Args:
        url: HTTP or HTTPS URL pointing to an image.
        timeout: Optional network timeout in seconds.
        max_bytes: Largest accepted payload.

    Returns:
        The undecoded image bytes.

    Raises:
        InvalidImageURLError: If the URL is not HTTP/HTTPS or missing a host.
        ImageFetchError: For network issues, non-2xx responses, non-image
            content types or oversized payloads.
    """

    _validate_url(url)
    logger.info("Fetching image", extra={"image_url": url})
    try:
        response = requests.get(url, timeout=timeout, stream=True)
    except requests.RequestException as exc:
        logger.error("Network error fetching image", extra={"image_url": url, "error": str(exc)})
        raise ImageFetchError(f"Network error fetching {url}: {exc}") from exc

    try:
        if not 200 <= response.status_code < 300:
            logger.warning(
                "Non-success status when fetching image",
                extra={"image_url": url, "status_code": response.status_code},
            )
            raise ImageFetchError(f"Failed to fetch {url}: HTTP {response.status_code}")

        content_type = response.headers.get("Content-Type", "")
        if content_type and not content_type.startswith("image/"):
            raise ImageFetchError(f"Expected an image from {url}, got '{content_type}'")
        declared = response.headers.get("Content-Length")
        if declared and declared.isdigit() and int(declared) > max_bytes:
            raise ImageFetchError(f"Image at {url} declares {declared} bytes, limit is {max_bytes}")

        # The declared length can be absent or wrong; stop reading once past the limit.
        buffer = bytearray()
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                buffer.extend(chunk)
                if len(buffer) > max_bytes:
                    raise ImageFetchError(f"Image at {url} exceeds {max_bytes} bytes")
        except requests.RequestException as exc:
            raise ImageFetchError(f"Network error reading {url}: {exc}") from exc
    finally:
        response.close()

    logger.debug("Fetched image successfully", extra={"length": len(buffer)})
    return bytes(buffer)


__all__ = ["InvalidImageURLError", "ImageFetchError", "MAX_IMAGE_BYTES", "fetch_image"]
