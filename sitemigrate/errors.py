"""Exception hierarchy for a migration run."""


class MigrationError(Exception):
    """Base class for every error that aborts (part of) a migration run."""


class ConfigError(MigrationError):
    """The configuration file is missing, unreadable, or invalid."""


class TargetsNotFoundError(MigrationError):
    def __init__(self, path) -> None:
        super().__init__(f"Targets file not found: {path}")
        self.path = path


class ContentNotFoundError(MigrationError):
    """The main-content selector matched nothing on the page."""

    def __init__(self, url: str, selector: str) -> None:
        super().__init__(f"No element matches content selector {selector!r} on {url}")
        self.url = url
        self.selector = selector


class PageMigrationError(MigrationError):
    """Wraps any failure raised while migrating a single target."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Failed to migrate {url}: {reason}")
        self.url = url
        self.reason = reason
