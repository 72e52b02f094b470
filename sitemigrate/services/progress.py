"""Persisted record of targets that have already been migrated."""

import logging
import os
from pathlib import Path
from typing import List

from sitemigrate.services.lines import read_lines

logger = logging.getLogger(__name__)


class ProgressStore:
    """Newline-delimited done list, rewritten in full after every commit.

    When *enabled* is False the store never touches the filesystem.
    """

    def __init__(self, path: Path, enabled: bool) -> None:
        self.path = Path(path)
        self.enabled = enabled
        self._records: List[str] = []
        self._seen: set = set()

    @property
    def records(self) -> List[str]:
        return list(self._records)

    def ensure(self) -> None:
        """Create an empty store file if history is on and none exists."""
        if self.enabled and not self.path.exists():
            logger.info("Creating empty progress file %s", self.path)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("", encoding="utf-8")

    async def load(self) -> List[str]:
        """Read previously completed targets; empty when history is off."""
        if not self.enabled:
            return []
        records = await read_lines(self.path)
        self._records = []
        self._seen = set()
        for url in records:
            self._remember(url)
        logger.info("Loaded %d completed targets from %s", len(self._records), self.path)
        # duplicates in the file are tolerated; reconciliation uses set semantics
        return records

    def commit(self, url: str) -> None:
        """Record *url* as done and persist the whole accumulated list."""
        if not self.enabled:
            return
        self._remember(url)
        self._write()

    def _remember(self, url: str) -> None:
        if url not in self._seen:
            self._seen.add(url)
            self._records.append(url)

    def _write(self) -> None:
        # write-then-rename, so readers see either the old or the new list
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        payload = "".join(f"{url}\n" for url in self._records)
        with open(tmp_path, "w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, self.path)
