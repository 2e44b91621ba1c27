import uuid
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from models.analysis import AnalysisResult


class SectionType(str, Enum):
    INTRO = "intro"
    LR = "lr"
    METHOD = "method"
    ANALYSIS = "analysis"
    DISC = "disc"
    CONC = "conc"
    REFS = "refs"


SECTION_LABELS = {
    SectionType.INTRO: "1. Pengenalan",
    SectionType.LR: "2. Sorotan Literatur",
    SectionType.METHOD: "3. Metodologi",
    SectionType.ANALYSIS: "4. Hasil & Analisis",
    SectionType.DISC: "5. Perbincangan",
    SectionType.CONC: "6. Kesimpulan",
    SectionType.REFS: "7. Rujukan",
}


class ScopusQuartile(str, Enum):
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"


class TargetLanguage(str, Enum):
    ENGLISH = "English"
    MALAY = "Malay"
    ARABIC = "Arabic"
    MANDARIN = "Mandarin"


class ResearchContext(BaseModel):
    """What a finished review or an analysis hands over to the writing studio."""

    model_config = ConfigDict(frozen=True)

    topic: str = ""
    review_type: str = ""
    synthesis: str = ""
    draft: str = ""
    references: str = ""
    analysis_result: Optional[AnalysisResult] = None


def _empty_sections() -> dict[SectionType, str]:
    return {section: "" for section in SectionType}


class CompositionWorkspace(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    active_section: SectionType = SectionType.INTRO
    sections: dict[SectionType, str] = Field(default_factory=_empty_sections)
    quartile: ScopusQuartile = ScopusQuartile.Q1
    context: Optional[ResearchContext] = None
    suggestions: tuple[str, ...] = ()
    citations: tuple[str, ...] = ()
    loading: bool = False

    @property
    def active_text(self) -> str:
        return self.sections.get(self.active_section, "")

    @property
    def topic(self) -> str:
        return self.context.topic if self.context and self.context.topic else ""


class TextTarget(BaseModel):
    """The part of a section a writing tool acts on, fixed when the call starts."""

    section: SectionType
    source: str = ""
    text: str
    is_selection: bool = False
    start: int = 0
    end: int = 0
