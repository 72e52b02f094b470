"""Canonical Markdown formatting of migrated documents."""

import mdformat

DEFAULT_PRINT_WIDTH = 100


def format_markdown(markdown: str, print_width: int = DEFAULT_PRINT_WIDTH) -> str:
    """Return *markdown* reformatted with prose wrapped at *print_width*."""
    return mdformat.text(markdown, options={"wrap": print_width})


def compose_document(
    front_matter: str,
    body: str,
    print_width: int = DEFAULT_PRINT_WIDTH,
) -> str:
    """Join *front_matter* and the formatted *body* into one document.

    The front matter is kept verbatim: the formatter would read its ``---``
    fences as Markdown thematic breaks.
    """
    formatted = format_markdown(body, print_width).strip() if body.strip() else ""
    if not formatted:
        return f"{front_matter}\n"
    return f"{front_matter}\n\n{formatted}\n"
