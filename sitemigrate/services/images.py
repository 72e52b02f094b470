"""Image download into a page's output directory."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

import httpx

logger = logging.getLogger(__name__)

TIMEOUT = 30  # seconds
ALLOWED_SCHEMES = {"http", "https"}
_FALLBACK_FILENAME = "image"


def filename_for(url: str) -> str:
    """Return the local filename for *url*: the decoded tail of its path."""
    path = unquote(urlparse(url).path)
    name = path.rsplit("/", 1)[-1]
    # a decoded path may still contain separators or dot segments
    name = name.replace("\\", "_")
    if name in ("", ".", ".."):
        return _FALLBACK_FILENAME
    return name


def is_downloadable(url: str) -> bool:
    return urlparse(url).scheme in ALLOWED_SCHEMES


def new_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Return the HTTP client used for every image of a run."""
    return httpx.AsyncClient(follow_redirects=True, timeout=TIMEOUT, transport=transport)


def _write_atomic(target: Path, data: bytes) -> None:
    # write-then-rename, so a failed write never leaves a truncated image
    tmp_path = target.with_name(target.name + ".part")
    try:
        with open(tmp_path, "wb") as handle:
            handle.write(data)
        os.replace(tmp_path, target)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


async def download_image(client: httpx.AsyncClient, url: str, destination: Path) -> Path:
    """Stream *url* into *destination* and return the written file.

    The body is fully received before anything is written; an existing file
    with the same name is replaced only once the new one is complete.

    Raises:
        ValueError: if *url* is not an http/https URL.
        httpx.HTTPError: on network errors or a non-2xx response.
    """
    if not is_downloadable(url):
        raise ValueError(f"Scheme '{urlparse(url).scheme}' is not allowed. Use http or https.")

    target = Path(destination) / filename_for(url)
    chunks = []
    async with client.stream("GET", url) as response:
        response.raise_for_status()
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)

    await asyncio.to_thread(_write_atomic, target, b"".join(chunks))

    logger.debug("Downloaded %s -> %s", url, target)
    return target
