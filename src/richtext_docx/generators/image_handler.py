"""Image payload resolution and sizing for Word generation.

Resolves image sources (inline data URIs, remote URLs, local paths) to raw
bytes, concurrently and without ever failing the export: an image that
cannot be resolved yields None and is left out of the document. Also
computes display sizes, reading native dimensions with Pillow when the
markup does not give them.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
import re
from pathlib import Path
from typing import Optional

import httpx
from PIL import Image, UnidentifiedImageError

from richtext_docx.config import ImageConfig
from richtext_docx.exceptions import ImageError
from richtext_docx.ir.schema import DocumentModel, ImageBlock

logger = logging.getLogger(__name__)

_DATA_URI = re.compile(r"^data:[^,]*;base64,(.*)$", re.DOTALL)

SCREEN_DPI = 96


def is_data_uri(source: str) -> bool:
    return source.startswith("data:")


def is_remote(source: str) -> bool:
    return source.lower().startswith(("http://", "https://"))


def decode_data_uri(source: str) -> bytes:
    """Decode a base64 ``data:`` URI.

    Raises:
        ImageError: If the URI is not base64 encoded or the payload is malformed.
    """
    match = _DATA_URI.match(source.strip())
    if not match:
        raise ImageError("Image data URI is not base64 encoded")
    try:
        return base64.b64decode("".join(match.group(1).split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageError(f"Malformed base64 image data: {exc}") from exc


async def resolve_image(
    source: str,
    client: httpx.AsyncClient,
    base_dir: Optional[Path] = None,
) -> Optional[bytes]:
    """Resolve one image source to its bytes, or None if unavailable.

    Payloads that are empty or not a readable image count as unavailable.

    Args:
        source: Data URI, http(s) URL or file path.
        client: HTTP client used for remote sources.
        base_dir: Base directory for relative file paths.
    """
    data = await _load_source(source, client, base_dir)
    if data is None:
        return None
    if _native_size(data) is None:
        logger.warning("Ignoring unreadable image data from %.60s", source)
        return None
    return data


async def _load_source(
    source: str,
    client: httpx.AsyncClient,
    base_dir: Optional[Path],
) -> Optional[bytes]:
    if not source:
        return None

    if is_data_uri(source):
        try:
            return decode_data_uri(source)
        except ImageError as exc:
            logger.warning("Failed to decode inline image: %s", exc)
            return None

    if is_remote(source):
        try:
            response = await client.get(source)
        except httpx.HTTPError as exc:
            logger.warning("Failed to fetch image %s: %s", source, exc)
            return None
        if not response.is_success:
            logger.warning("Failed to fetch image %s: HTTP %d", source, response.status_code)
            return None
        return response.content

    path = Path(source)
    if base_dir and not path.is_absolute():
        path = base_dir / path
    try:
        return await asyncio.to_thread(path.read_bytes)
    except OSError as exc:
        logger.warning("Failed to read image %s: %s", path, exc)
        return None


async def resolve_images(
    model: DocumentModel,
    config: Optional[ImageConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
    base_dir: Optional[Path] = None,
) -> dict[str, bytes]:
    """Resolve every distinct image source of ``model`` concurrently.

    Returns:
        Bytes keyed by source. Sources that failed to resolve are absent.
    """
    config = config or ImageConfig()
    sources = list(dict.fromkeys(block.source for block in model.images()))
    if not sources:
        return {}

    if client is None:
        async with httpx.AsyncClient(
            timeout=config.fetch_timeout_seconds, follow_redirects=True
        ) as owned_client:
            return await _resolve_all(sources, owned_client, config, base_dir)
    return await _resolve_all(sources, client, config, base_dir)


async def _resolve_all(
    sources: list[str],
    client: httpx.AsyncClient,
    config: ImageConfig,
    base_dir: Optional[Path],
) -> dict[str, bytes]:
    semaphore = asyncio.Semaphore(max(config.max_concurrent_fetches, 1))

    async def _bounded(source: str) -> Optional[bytes]:
        async with semaphore:
            return await resolve_image(source, client, base_dir)

    results = await asyncio.gather(*(_bounded(source) for source in sources))
    return {source: data for source, data in zip(sources, results) if data is not None}


def omit_unresolved_images(model: DocumentModel, payloads: dict[str, bytes]) -> DocumentModel:
    """Return a copy of ``model`` without image blocks that have no payload."""
    blocks = [
        block
        for block in model.blocks
        if not isinstance(block, ImageBlock) or block.source in payloads
    ]
    return DocumentModel(blocks=blocks)


def compute_pixel_size(block: ImageBlock, data: bytes, config: ImageConfig) -> tuple[int, int]:
    """Compute the display size of an image in pixels.

    Uses the block's width/height when given. A missing dimension is derived
    from the native image size (keeping its aspect ratio), falling back to
    the configured default width and aspect ratio. The result is scaled
    down to fit ``config.max_width_inches``.
    """
    width, height = block.width, block.height

    if width is None or height is None:
        native = _native_size(data)
        if native is not None:
            native_w, native_h = native
            if width is None and height is None:
                width, height = native_w, native_h
            elif width is None:
                width = round(height * native_w / native_h)
            else:
                height = round(width * native_h / native_w)
        else:
            if width is None and height is None:
                width = config.default_width_px
            if width is None:
                width = round(height / config.default_aspect_ratio)
            if height is None:
                height = round(width * config.default_aspect_ratio)

    max_width = round(config.max_width_inches * SCREEN_DPI)
    if width > max_width:
        height = round(height * max_width / width)
        width = max_width

    return max(width, 1), max(height, 1)


def _native_size(data: bytes) -> Optional[tuple[int, int]]:
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError, EOFError, ValueError):
        return None
    if width <= 0 or height <= 0:
        return None
    return width, height
