from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel


class ExtractionResult(BaseModel):
    """Everything pulled from one page before Markdown conversion."""

    url: str
    destination: Path
    content: str  # inner HTML of the main-content root
    title: Optional[str] = None
    publish_date: Optional[str] = None
    update_date: Optional[str] = None
    description: str = ""
    images: List[str] = []
