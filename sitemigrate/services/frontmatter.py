"""Front-matter block written at the top of every migrated page."""

from typing import List

from sitemigrate.models.extraction import ExtractionResult

PLACEHOLDER = "TODO"


def make_frontmatter(result: ExtractionResult) -> str:
    """Return the YAML front-matter block for *result*, fences included.

    ``title``, ``date`` and ``updated`` are written only when they were
    extracted. The ``date`` placeholder stands in for a missing date so the
    key is never emitted twice.
    """
    lines: List[str] = ["---"]
    if result.title is not None:
        lines.append(f'title: "{_escape_yaml(result.title)}"')
    if result.publish_date is not None:
        lines.append(f'date: "{_escape_yaml(result.publish_date)}"')
    if result.update_date is not None:
        lines.append(f'updated: "{_escape_yaml(result.update_date)}"')
    lines.append(f'description: "{_escape_yaml(result.description)}"')
    lines.append(f"authors: {PLACEHOLDER}")
    if result.publish_date is None:
        lines.append(f"date: {PLACEHOLDER}")
    lines.append("tags:")
    lines.append(f"  - {PLACEHOLDER}")
    lines.append("---")
    return "\n".join(lines)


def _escape_yaml(value: str) -> str:
    """Escape characters that would break inline double-quoted YAML strings."""
    value = value.replace("\\", "\\\\").replace('"', '\\"')
    return value.replace("\r", "").replace("\n", " ")
