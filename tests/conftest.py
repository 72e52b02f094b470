"""Shared fakes for the browser page and the image transport.

``FakePage`` implements the slice of the Playwright ``Page`` API that the
extractor uses, backed by BeautifulSoup so CSS selectors behave like they
would in the browser for the simple documents used in the tests.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, List
from urllib.parse import urljoin

import httpx
import pytest
from bs4 import BeautifulSoup
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class FakeElement:
    def __init__(self, tag, base_url: str) -> None:
        self.tag = tag
        self.base_url = base_url

    async def inner_html(self) -> str:
        return "".join(str(child) for child in self.tag.contents)

    async def text_content(self) -> str:
        return self.tag.get_text()

    async def get_attribute(self, name: str):
        return self.tag.get(name)

    async def eval_on_selector_all(self, selector: str, expression: str) -> List[str]:
        # Only used for collecting resolved image sources
        sources = []
        for img in self.tag.select(selector):
            src = img.get("src")
            sources.append(urljoin(self.base_url, src) if src else "")
        return sources


class FakePage:
    def __init__(self, pages: Dict[str, str]) -> None:
        self.pages = pages
        self.url = None
        self.soup = None
        self.goto_calls: List[tuple] = []
        self.scripts: List[str] = []
        self.waited_for: List[tuple] = []

    @property
    def visited(self) -> List[str]:
        return [url for url, _ in self.goto_calls]

    async def goto(self, url: str, **kwargs) -> None:
        self.goto_calls.append((url, kwargs))
        if url not in self.pages:
            raise PlaywrightError(f"net::ERR_NAME_NOT_RESOLVED at {url}")
        self.url = url
        self.soup = BeautifulSoup(self.pages[url], "lxml")

    async def eval_on_selector_all(self, selector: str, expression: str) -> None:
        assert "remove()" in expression
        for node in self.soup.select(selector):
            node.decompose()

    async def add_script_tag(self, path=None, **kwargs) -> None:
        self.scripts.append(str(path))

    async def query_selector(self, selector: str):
        tag = self.soup.select_one(selector)
        return FakeElement(tag, self.url) if tag is not None else None

    async def wait_for_selector(self, selector: str, state: str = "visible", timeout: float = 30_000):
        self.waited_for.append((selector, state, timeout))
        tag = self.soup.select_one(selector)
        if tag is None:
            raise PlaywrightTimeoutError(f"Timeout {timeout}ms exceeded waiting for {selector!r}")
        return FakeElement(tag, self.url)


def session_for(page: FakePage):
    """Return a session factory that yields *page*, shaped like ``browser_session``."""
    launches = []

    @asynccontextmanager
    async def factory(*, headless: bool = True):
        launches.append(headless)
        yield page

    factory.launches = launches
    return factory


@pytest.fixture
def make_page():
    return FakePage


@pytest.fixture
def make_session():
    return session_for


@pytest.fixture
def image_requests() -> List[str]:
    return []


@pytest.fixture
def image_client(image_requests):
    """httpx client serving PNG bytes for any ``.png`` URL and 404 otherwise."""

    def handler(request: httpx.Request) -> httpx.Response:
        image_requests.append(str(request.url))
        if request.url.path.endswith(".png"):
            return httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})
        return httpx.Response(404)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    yield client
    asyncio.run(client.aclose())
