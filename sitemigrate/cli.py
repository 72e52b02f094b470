import argparse
import asyncio
import logging
import logging.config
import sys
from pathlib import Path
from typing import List, Optional

from sitemigrate.errors import MigrationError
from sitemigrate.models.config import load_config
from sitemigrate.services.migrator import Migrator

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool = False) -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
            },
            "root": {"level": "DEBUG" if verbose else "INFO", "handlers": ["console"]},
        }
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitemigrate",
        description=(
            "Migrate a fixed list of web pages into a tree of Markdown files, "
            "one index.md per page plus its images."
        ),
    )
    parser.add_argument("--config", type=Path, default=Path("config.json"), help="JSON configuration file")
    parser.add_argument("--targets", type=Path, default=Path("targets.txt"), help="URLs to migrate, one per line")
    parser.add_argument("--done", type=Path, default=Path("done.txt"), help="progress file used when history is on")
    parser.add_argument("--output", type=Path, default=Path("output"), help="output directory (reset on every run)")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_config(args.config)
        migrator = Migrator(
            config,
            targets_path=args.targets,
            done_path=args.done,
            output_root=args.output,
        )
        report = asyncio.run(migrator.run())
    except MigrationError as exc:
        logger.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130

    if report.failed:
        logger.warning("%d targets failed: %s", len(report.failed), ", ".join(f.url for f in report.failed))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
