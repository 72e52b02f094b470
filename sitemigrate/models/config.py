import json
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sitemigrate.errors import ConfigError


class Selectors(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    main: str = Field(min_length=1, description="Selector of the main content root.")
    title: Optional[str] = None
    date: Optional[str] = None
    update: Optional[str] = None


class MigrationConfig(BaseModel):
    """Run configuration, loaded once at startup and shared read-only."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    selectors: Selectors
    deletions: List[str] = Field(
        default_factory=list,
        description="Selectors whose matches are removed before extraction, in order.",
    )
    modifications: Optional[str] = Field(
        default=None,
        description="Path to a script injected into the page before extraction.",
    )
    history: bool = Field(
        default=False,
        description="Record completed targets and skip them on the next run.",
    )
    selector_timeout_ms: int = Field(default=30_000, ge=0)
    navigation_timeout_ms: int = Field(default=30_000, ge=0)
    headless: bool = True
    isolate_failures: bool = Field(
        default=False,
        description="Log a failed target and carry on instead of aborting the run.",
    )
    print_width: int = Field(default=100, ge=20)


def load_config(path: Path) -> MigrationConfig:
    """Read and validate the JSON configuration at *path*.

    Raises:
        ConfigError: if the file is missing, is not valid JSON, or fails validation.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Configuration file {path} is not valid JSON: {exc}") from exc

    try:
        return MigrationConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}:\n{exc}") from exc
