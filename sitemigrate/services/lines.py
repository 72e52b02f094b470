"""Newline-delimited URL list reading."""

import asyncio
from pathlib import Path
from typing import Iterable, List, Union

_BOM = "\ufeff"


def parse_lines(lines: Iterable[Union[str, bytes]]) -> List[str]:
    """Return the stripped, non-empty entries of *lines* in input order.

    A byte-order mark at the start of the first line is dropped.
    """
    entries: List[str] = []
    for index, line in enumerate(lines):
        if isinstance(line, bytes):
            line = line.decode("utf-8-sig" if index == 0 else "utf-8", errors="replace")
        elif index == 0:
            line = line.lstrip(_BOM)
        stripped = line.strip()
        if stripped:
            entries.append(stripped)
    return entries


def _read_file(path: Path) -> List[str]:
    with open(path, "rb") as handle:
        return parse_lines(handle)


async def read_lines(path: Path) -> List[str]:
    """Read *path* off the event loop and return its entries.

    Raises:
        FileNotFoundError: if *path* does not exist.
    """
    return await asyncio.to_thread(_read_file, Path(path))
