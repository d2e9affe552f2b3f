from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class DedupKind(str, Enum):
    SINGLETON = "singleton"  # once per student, ever
    KEYED = "keyed"  # once per student per source_document_id
    REARM = "rearm"  # the rule decides when a new award is due


class BadgeDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    xp: int
    dedup: DedupKind = DedupKind.SINGLETON


class CandidateAward(BaseModel):
    model_config = ConfigDict(frozen=True)

    badge_id: str
    source_document_id: Optional[str] = None
    details: str = ""


class StudentResult(BaseModel):
    student_id: str
    ok: bool
    awarded: list[CandidateAward] = []
    total_xp: Optional[int] = None
    error: Optional[str] = None


class BatchSummary(BaseModel):
    academic_year_id: Optional[str] = None
    results: list[StudentResult] = []

    @property
    def processed(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> list[str]:
        return [r.student_id for r in self.results if not r.ok]

    @property
    def awarded(self) -> int:
        return sum(len(r.awarded) for r in self.results)
