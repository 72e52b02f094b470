"""Per-page extraction: navigate, clean up, read configured fields, fetch images."""

import logging
import posixpath
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse

import httpx
from playwright.async_api import Page

from sitemigrate.errors import ContentNotFoundError
from sitemigrate.models.config import MigrationConfig
from sitemigrate.models.extraction import ExtractionResult
from sitemigrate.services.images import download_image, is_downloadable

logger = logging.getLogger(__name__)

DESCRIPTION_SELECTOR = 'meta[name="description"]'

_REMOVE_NODES_JS = "nodes => nodes.forEach(node => node.remove())"
_IMAGE_SOURCES_JS = "images => images.map(image => image.src)"


def destination_for(output_root: Path, url: str) -> Path:
    """Return the output directory mirroring the path of *url*.

    Dot segments are resolved first, so no target can point outside
    *output_root*; the site root maps to *output_root* itself.
    """
    path = posixpath.normpath("/" + urlparse(url).path)
    relative = path.lstrip("/")
    if not relative or relative == ".":
        return Path(output_root)
    return Path(output_root).joinpath(*relative.split("/"))


class PageExtractor:
    """Runs the extraction steps for one target at a time on a shared page."""

    def __init__(
        self,
        config: MigrationConfig,
        output_root: Path,
        http_client: httpx.AsyncClient,
    ) -> None:
        self.config = config
        self.output_root = Path(output_root)
        self.http_client = http_client

    async def extract(self, page: Page, url: str) -> ExtractionResult:
        """Produce the :class:`ExtractionResult` for *url*.

        Raises:
            ContentNotFoundError: if the main-content selector matches nothing.
            playwright.async_api.TimeoutError: if navigation or an optional
                field selector does not resolve in time.
            httpx.HTTPError: if an image cannot be downloaded.
        """
        destination = destination_for(self.output_root, url)
        destination.mkdir(parents=True, exist_ok=True)

        await page.goto(url, wait_until="networkidle", timeout=self.config.navigation_timeout_ms)
        await self._apply_deletions(page)
        await self._apply_modifications(page)

        selectors = self.config.selectors
        root = await page.query_selector(selectors.main)
        if root is None:
            raise ContentNotFoundError(url, selectors.main)
        content = await root.inner_html()

        title = await self._read_text(page, selectors.title)
        publish_date = await self._read_text(page, selectors.date)
        update_date = await self._read_text(page, selectors.update)
        description = await self._read_description(page)

        images: List[str] = [
            src for src in await root.eval_on_selector_all("img", _IMAGE_SOURCES_JS) if src
        ]
        await self._download_images(images, destination)

        return ExtractionResult(
            url=url,
            destination=destination,
            content=content,
            title=title,
            publish_date=publish_date,
            update_date=update_date,
            description=description,
            images=images,
        )

    async def _apply_deletions(self, page: Page) -> None:
        for selector in self.config.deletions:
            await page.eval_on_selector_all(selector, _REMOVE_NODES_JS)

    async def _apply_modifications(self, page: Page) -> None:
        script = self.config.modifications
        if not script:
            return
        if not Path(script).is_file():
            logger.warning("Modification script %s does not exist; skipping", script)
            return
        await page.add_script_tag(path=script)

    async def _read_text(self, page: Page, selector: Optional[str]) -> Optional[str]:
        if not selector:
            return None
        # Some fields are filled in by scripts after load, so wait for them.
        handle = await page.wait_for_selector(
            selector, state="attached", timeout=self.config.selector_timeout_ms
        )
        text = await handle.text_content() if handle is not None else None
        return (text or "").strip()

    async def _read_description(self, page: Page) -> str:
        meta = await page.query_selector(DESCRIPTION_SELECTOR)
        if meta is None:
            return ""
        return (await meta.get_attribute("content") or "").strip()

    async def _download_images(self, images: List[str], destination: Path) -> None:
        for src in images:
            if not is_downloadable(src):
                logger.warning("Skipping image with unsupported scheme: %.80s", src)
                continue
            await download_image(self.http_client, src, destination)
