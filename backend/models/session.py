import uuid
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Stage(IntEnum):
    PLAN = 1
    SEARCH = 2
    EXTRACT = 3
    SYNTHESIZE = 4
    WRITE = 5
    FINISH = 6


STAGE_DESCRIPTIONS = {
    Stage.PLAN: "Plan research",
    Stage.SEARCH: "Gather sources",
    Stage.EXTRACT: "Extract key data",
    Stage.SYNTHESIZE: "Analyze findings",
    Stage.WRITE: "Draft report",
    Stage.FINISH: "Finalize output",
}


class ReviewType(str, Enum):
    SLR = "Systematic Literature Review"
    SCOPING = "Scoping Review"
    NARRATIVE = "Narrative Review"


class CapturedDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    methodology: str = "N/A"
    findings: tuple[str, ...] = ()
    limitations: str = "N/A"
    citation: str = "N/A"
    relevance_score: float = 0.0


class Paper(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    authors: str = "Various Authors"
    year: str = "n.d."
    journal: str = "Academic Journal"
    url: str
    captured_data: Optional[CapturedDetails] = None


class ScreeningMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    identified: int = 0
    screened: int = 0
    excluded: int = 0
    included: int = 0

    @classmethod
    def from_count(cls, count: int) -> "ScreeningMetrics":
        return cls(
            identified=count,
            screened=count,
            excluded=int(count * 0.2),
            included=int(count * 0.8),
        )


class ReviewSession(BaseModel):
    """One literature-review project moving through the six stages.

    Sessions are values: transitions in ``services.workflow`` return a new
    session instead of mutating this one.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    topic: str = ""
    review_type: ReviewType = ReviewType.SLR
    references: str = ""
    stage: Stage = Stage.PLAN
    papers: tuple[Paper, ...] = ()
    search_summary: Optional[str] = None
    synthesis: str = ""
    draft: str = ""
    metrics: ScreeningMetrics = ScreeningMetrics()
    loading: bool = False
    created_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def progress_percent(self) -> int:
        return round(int(self.stage) / len(Stage) * 100)

    def find_paper(self, paper_id: str) -> Optional[Paper]:
        for paper in self.papers:
            if paper.id == paper_id:
                return paper
        return None


class SearchOutcome(BaseModel):
    papers: list[Paper] = []
    summary: str = ""
