"""Migration controller: loads inputs, reconciles, and drives each target in order."""

import asyncio
import logging
import shutil
from contextlib import AsyncExitStack
from enum import Enum
from pathlib import Path
from typing import AsyncContextManager, Callable, List, Optional, Tuple

import httpx
from playwright.async_api import Page

from sitemigrate.errors import MigrationError, PageMigrationError, TargetsNotFoundError
from sitemigrate.models.config import MigrationConfig
from sitemigrate.models.report import MigrationReport, TargetFailure
from sitemigrate.services.browser import browser_session
from sitemigrate.services.converter import html_to_markdown
from sitemigrate.services.extractor import PageExtractor
from sitemigrate.services.formatter import compose_document
from sitemigrate.services.frontmatter import make_frontmatter
from sitemigrate.services.gate import ReadinessGate
from sitemigrate.services.images import new_client
from sitemigrate.services.lines import read_lines
from sitemigrate.services.progress import ProgressStore
from sitemigrate.services.reconciler import reconcile

logger = logging.getLogger(__name__)

OUTPUT_FILENAME = "index.md"

SessionFactory = Callable[..., AsyncContextManager[Page]]


class MigrationState(str, Enum):
    AWAITING_INPUTS = "awaiting_inputs"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


class Migrator:
    """Owns one end-to-end migration run.

    The run waits for the target list (and, with history on, the done list)
    to finish loading, computes the worklist once, then migrates every
    target sequentially through a single shared browser page. A target is
    recorded as done only after its ``index.md`` has been written.
    """

    def __init__(
        self,
        config: MigrationConfig,
        *,
        targets_path: Path,
        done_path: Path,
        output_root: Path,
        session_factory: SessionFactory = browser_session,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config
        self.targets_path = Path(targets_path)
        self.output_root = Path(output_root)
        self.progress = ProgressStore(done_path, enabled=config.history)
        self.session_factory = session_factory
        self.http_client = http_client
        self.state = MigrationState.AWAITING_INPUTS

    async def run(self) -> MigrationReport:
        try:
            report = await self._run()
        except BaseException:
            self.state = MigrationState.FAILED
            raise
        self.state = MigrationState.DONE
        return report

    async def _run(self) -> MigrationReport:
        self._reset_output()
        self.progress.ensure()

        targets, done = await self._load_inputs()
        worklist = reconcile(targets, done)
        done_set = set(done)
        report = MigrationReport(
            worklist=worklist,
            skipped=[url for url in dict.fromkeys(targets) if url in done_set],
        )
        logger.info(
            "Worklist has %d targets (%d already done)", len(worklist), len(report.skipped)
        )

        self.state = MigrationState.RUNNING
        async with AsyncExitStack() as stack:
            client = self.http_client
            if client is None:
                client = await stack.enter_async_context(new_client())
            page = await stack.enter_async_context(
                self.session_factory(headless=self.config.headless)
            )
            extractor = PageExtractor(self.config, self.output_root, client)

            for position, url in enumerate(worklist, start=1):
                logger.info("Migrating %s (%d/%d)", url, position, len(worklist))
                try:
                    await self._migrate_target(extractor, page, url)
                except Exception as exc:
                    reason = str(exc) or type(exc).__name__
                    logger.exception("Migration failed for %s", url)
                    if not self.config.isolate_failures:
                        raise PageMigrationError(url, reason) from exc
                    report.failed.append(TargetFailure(url=url, error=reason))
                    continue
                report.migrated.append(url)

        logger.info(
            "Migration finished: %d migrated, %d failed",
            len(report.migrated),
            len(report.failed),
        )
        return report

    async def _load_inputs(self) -> Tuple[List[str], List[str]]:
        """Load the target and done lists concurrently and join on both."""
        loaders = {"targets": self._read_targets}
        if self.config.history:
            loaders["done"] = self.progress.load

        gate = ReadinessGate(loaders)
        loaded = {}

        async def load(name: str) -> None:
            try:
                loaded[name] = await loaders[name]()
            except Exception as exc:
                gate.fail(exc)
                return
            gate.signal(name)

        tasks = [asyncio.create_task(load(name)) for name in loaders]
        try:
            await gate.wait()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        targets = loaded["targets"]
        done = loaded.get("done", [])
        logger.info("Loaded %d targets and %d done records", len(targets), len(done))
        return targets, done

    async def _read_targets(self) -> List[str]:
        try:
            return await read_lines(self.targets_path)
        except FileNotFoundError:
            raise TargetsNotFoundError(self.targets_path)

    async def _migrate_target(self, extractor: PageExtractor, page: Page, url: str) -> None:
        result = await extractor.extract(page, url)
        front_matter = make_frontmatter(result)
        body = html_to_markdown(result.content)
        document = compose_document(front_matter, body, self.config.print_width)

        output_file = result.destination / OUTPUT_FILENAME
        output_file.write_text(document, encoding="utf-8")
        logger.info("Wrote %s (%d images)", output_file, len(result.images))

        self.progress.commit(url)

    def _reset_output(self) -> None:
        """Delete and recreate the output root; every run starts from scratch."""
        root = self.output_root.resolve()
        if root == Path.cwd().resolve() or root == Path(root.anchor):
            raise MigrationError(f"Refusing to reset output directory {root}")
        if root.exists():
            logger.info("Removing previous output in %s", root)
            shutil.rmtree(root)
        root.mkdir(parents=True)
