import logging
from agents.base_agent import BaseAgent
from agents.prompts import CLEAN_TEXT_INSTRUCTION
from models.analysis import ANALYSIS_SCHEMA, AnalysisResult
from services.text_cleaner import sanitize

logger = logging.getLogger("agent.analysis")


class DataAnalysisAgent(BaseAgent):
    """Summarizes raw research data and proposes a chart."""

    def __init__(self, llm_service):
        super().__init__("data_analysis", llm_service)

    async def run(self, data: str) -> AnalysisResult:
        result = await self.llm.generate_json(
            f"Analyze data: {data}. {CLEAN_TEXT_INSTRUCTION}",
            schema=ANALYSIS_SCHEMA,
        )
        if not isinstance(result, dict):
            raise ValueError(f"Expected a JSON object, got {type(result).__name__}")
        return AnalysisResult(**sanitize(result))
