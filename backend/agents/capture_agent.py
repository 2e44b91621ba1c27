import logging
from agents.base_agent import BaseAgent
from agents.prompts import CLEAN_TEXT_INSTRUCTION
from models.session import CapturedDetails, Paper
from services.text_cleaner import strip_markdown

logger = logging.getLogger("agent.capture")

CAPTURE_SCHEMA = {
    "type": "object",
    "properties": {
        "methodology": {"type": "string"},
        "findings": {"type": "array", "items": {"type": "string"}},
        "limitations": {"type": "string"},
        "citation": {"type": "string"},
        "relevance_score": {"type": "number"},
    },
    "required": ["methodology", "findings", "citation"],
}


def fallback_details(paper: Paper) -> CapturedDetails:
    return CapturedDetails(
        methodology="Error parsing details",
        findings=("Check article link manually",),
        limitations="N/A",
        citation=paper.title,
        relevance_score=0.0,
    )


def _score(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


class CaptureAgent(BaseAgent):
    """EXTRACT stage: pulls methodology, findings and an APA citation for one paper."""

    def __init__(self, llm_service):
        super().__init__("capture", llm_service)

    async def run(self, paper: Paper) -> CapturedDetails:
        prompt = f"""Analyze article: {paper.title} ({paper.url}).
Extract methodology, 3 key findings, limitations, and APA 7th citation, plus a relevance_score between 0 and 100.
Return the data as a clean JSON object with keys: methodology, findings, limitations, citation, relevance_score.
{CLEAN_TEXT_INSTRUCTION}"""

        try:
            data = await self.llm.generate_json(prompt, schema=CAPTURE_SCHEMA)
        except ValueError as e:
            logger.warning(f"Falling back to placeholder details for {paper.id}: {e}")
            return fallback_details(paper)

        if not isinstance(data, dict):
            logger.warning(f"Expected a JSON object for {paper.id}, got {type(data).__name__}")
            return fallback_details(paper)

        findings = data.get("findings") or []
        if isinstance(findings, str):
            findings = [findings]

        return CapturedDetails(
            methodology=strip_markdown(str(data.get("methodology") or "N/A")),
            findings=tuple(strip_markdown(str(f)) for f in findings),
            limitations=strip_markdown(str(data.get("limitations") or "N/A")),
            citation=strip_markdown(str(data.get("citation") or "N/A")),
            relevance_score=_score(data.get("relevance_score", data.get("relevanceScore"))),
        )
