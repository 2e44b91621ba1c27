import re
import logging
from typing import Optional
from models.report import MISSING_SECTION, StructuredReport

logger = logging.getLogger("report_parser")

# (field, label) in report order
REPORT_SECTIONS = (
    ("tajuk", "TAJUK"),
    ("abstrak", "ABSTRAK"),
    ("pengenalan", "PENGENALAN"),
    ("metodologi", "METODOLOGI"),
    ("hasil_kajian", "HASIL KAJIAN"),
    ("perbincangan", "PERBINCANGAN"),
    ("rumusan", "RUMUSAN"),
    ("rujukan", "RUJUKAN"),
)


def _label_pattern(label: str) -> str:
    words = r"\s+".join(re.escape(w) for w in label.split())
    return rf"\[\s*{words}\s*\]"


_LABEL_RE = re.compile(
    "|".join(f"(?P<{field}>{_label_pattern(label)})" for field, label in REPORT_SECTIONS),
    re.IGNORECASE,
)


def extract_sections(text: str) -> dict[str, Optional[str]]:
    """
    Find the body of each labeled section in a generated draft.

    A body runs from its ``[LABEL]`` to the next known label or the end of
    the text. The first occurrence of a label wins. Sections that never
    appear map to None.
    """
    text = text or ""
    markers = [(m.lastgroup, m.start(), m.end()) for m in _LABEL_RE.finditer(text)]

    sections: dict[str, Optional[str]] = {field: None for field, _ in REPORT_SECTIONS}
    for i, (field, _, body_start) in enumerate(markers):
        if sections[field] is not None:
            continue
        body_end = markers[i + 1][1] if i + 1 < len(markers) else len(text)
        sections[field] = text[body_start:body_end].strip()
    return sections


def parse_report(text: str) -> StructuredReport:
    """Parse a draft into a StructuredReport; absent sections get the placeholder."""
    sections = extract_sections(text)
    missing = tuple(field for field, body in sections.items() if body is None)
    if text and missing:
        logger.warning(f"Report draft is missing sections: {', '.join(missing)}")

    return StructuredReport(
        **{field: body if body is not None else MISSING_SECTION for field, body in sections.items()},
        missing_sections=missing,
    )
