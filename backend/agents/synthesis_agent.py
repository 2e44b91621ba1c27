import logging
from agents.base_agent import BaseAgent
from agents.prompts import CLEAN_TEXT_INSTRUCTION, TEMPLATE_KNOWLEDGE
from models.session import ReviewSession
from services.text_cleaner import strip_markdown

logger = logging.getLogger("agent.synthesis")


class SynthesisAgent(BaseAgent):
    """SYNTHESIZE stage: critical synthesis across every gathered source."""

    def __init__(self, llm_service):
        super().__init__("synthesis", llm_service)

    async def run(self, session: ReviewSession) -> str:
        captured = "\n".join(
            f"- {p.title}: {p.captured_data.methodology}; findings: {'; '.join(p.captured_data.findings)}"
            for p in session.papers
            if p.captured_data is not None
        )

        context = f"""Research Question: {session.topic}
Review Type: {session.review_type.value}
Search Summary: {session.search_summary or ''}
Search Articles: {', '.join(p.title for p in session.papers[:10])}
Extracted Details:
{captured or '- none'}
USER PROVIDED REFERENCES:
{session.references}"""

        prompt = f"""Create a high-level critical synthesis for a {session.review_type.value}.
Integrate all sources. Ensure you identify themes and contradictions.
DO NOT use markdown symbols. Use plain text with clear line breaks between paragraphs."""

        text = await self.llm.generate(
            f"Context: {context}\nTask: {prompt}\n{TEMPLATE_KNOWLEDGE}\n{CLEAN_TEXT_INSTRUCTION}",
            model=self.llm.reasoning_model,
        )
        return strip_markdown(text)
