from typing import List

from pydantic import BaseModel


class TargetFailure(BaseModel):
    url: str
    error: str


class MigrationReport(BaseModel):
    """Outcome of one migration run."""

    worklist: List[str] = []
    skipped: List[str] = []  # targets already recorded as done
    migrated: List[str] = []
    failed: List[TargetFailure] = []
