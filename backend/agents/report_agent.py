import logging
from agents.base_agent import BaseAgent
from agents.prompts import CLEAN_TEXT_INSTRUCTION, REPORT_LABEL_INSTRUCTION
from models.session import ReviewSession
from services.text_cleaner import strip_markdown

logger = logging.getLogger("agent.report")


class ReportAgent(BaseAgent):
    """WRITE stage: full labeled report draft built on the synthesis."""

    def __init__(self, llm_service):
        super().__init__("report", llm_service)

    async def run(self, session: ReviewSession) -> str:
        context = (
            f"Synthesis: {session.synthesis}\n"
            f"Query: {session.topic}\n"
            f"User References: {session.references}\n"
            f"Review Type: {session.review_type.value}"
        )
        prompt = f"Generate a full academic report draft for a {session.review_type.value}.\n{REPORT_LABEL_INSTRUCTION}"

        text = await self.llm.generate(
            f"Context: {context}\nTask: {prompt}\n{CLEAN_TEXT_INSTRUCTION}",
            model=self.llm.reasoning_model,
        )
        return strip_markdown(text)
