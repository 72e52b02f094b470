"""HTML fragment to Markdown conversion.

Headings come out in ATX style, ``<pre>`` blocks as fenced code, and links
in *referenced* style: ``[text][1]`` in the body with the ``[1]: url``
definitions collected after it, numbered in order of first use.
"""

import re
from typing import Dict, List, Tuple

from bs4 import BeautifulSoup, Comment
from markdownify import ATX, MarkdownConverter

# Tags whose entire subtree carries no readable content
_REMOVE_TAGS = {"script", "style", "noscript", "template"}

_LANGUAGE_CLASS_RE = re.compile(r"^(?:language|lang)[-_]([A-Za-z0-9_+.-]+)$")
_LANGUAGE_ATTRS = ("data-language", "data-lang")


class ReferenceLinkConverter(MarkdownConverter):
    """markdownify converter that emits reference-style links."""

    def __init__(self, **options) -> None:
        super().__init__(**options)
        self._references: Dict[Tuple[str, str], int] = {}

    def convert_a(self, el, text, parent_tags):
        if "_noformat" in parent_tags:
            return text
        href = el.get("href")
        label = text.strip() if text else ""
        if not href or not label:
            return text or ""

        key = (href, el.get("title") or "")
        number = self._references.setdefault(key, len(self._references) + 1)

        leading = " " if text[:1].isspace() else ""
        trailing = " " if text[-1:].isspace() else ""
        return f"{leading}[{label}][{number}]{trailing}"

    def reference_definitions(self) -> List[str]:
        definitions = []
        for (href, title), number in self._references.items():
            if title:
                escaped = title.replace('"', '\\"')
                definitions.append(f'[{number}]: {href} "{escaped}"')
            else:
                definitions.append(f"[{number}]: {href}")
        return definitions


def code_language(el) -> str:
    """Return the fence info string for a <pre> block, or an empty string.

    Looks at the <pre> and its <code> child for a `data-language`-style
    attribute or a `language-*` / `lang-*` class.
    """
    for node in (el, el.find("code")):
        if node is None:
            continue
        for key in _LANGUAGE_ATTRS:
            value = (node.get(key) or "").strip()
            if value and re.match(r"^[A-Za-z0-9_+.-]+$", value.split()[0]):
                return value.split()[0]
        for cls in node.get("class") or []:
            match = _LANGUAGE_CLASS_RE.match(cls)
            if match:
                return match.group(1)
    return ""


def _strip_noise(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(_REMOVE_TAGS):
        tag.decompose()
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()


def html_to_markdown(html: str) -> str:
    """Convert an HTML fragment to Markdown with reference-style links."""
    soup = BeautifulSoup(html, "lxml")
    _strip_noise(soup)

    converter = ReferenceLinkConverter(
        heading_style=ATX, code_language="", code_language_callback=code_language
    )
    body = converter.convert_soup(soup).strip()

    definitions = converter.reference_definitions()
    if not definitions:
        return body
    return f"{body}\n\n" + "\n".join(definitions)
