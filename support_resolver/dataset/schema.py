from dataclasses import dataclass, field
from typing import List
from pydantic import BaseModel, Field


class RawFaqItem(BaseModel):
    """One item as it appears under a category in the corpus file."""
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


@dataclass(frozen=True)
class FaqEntry:
    category: str
    question: str
    answer: str


@dataclass(frozen=True)
class SkippedItem:
    category: str
    index: int
    reason: str


@dataclass
class CorpusLoadResult:
    entries: List[FaqEntry] = field(default_factory=list)
    skipped: List[SkippedItem] = field(default_factory=list)
