import re
import logging
from enum import Enum
from agents.base_agent import BaseAgent
from agents.prompts import CLEAN_TEXT_INSTRUCTION
from models.composition import TargetLanguage
from services.text_cleaner import strip_markdown

logger = logging.getLogger("agent.writing")

LIST_MARKER = re.compile(r"^[-\d.\s]+")


class RewriteMode(str, Enum):
    HUMANIZE = "humanize"
    PARAPHRASE = "paraphrase"
    TRANSLATE = "translate"


class ComposeAgent(BaseAgent):
    """Writes new academic text for a section from a free-form instruction."""

    def __init__(self, llm_service):
        super().__init__("compose", llm_service)

    async def run(self, input_data: dict) -> str:
        text = await self.llm.generate(
            f"Context: {input_data['context']}\nTask: {input_data['prompt']}. {CLEAN_TEXT_INSTRUCTION}",
            model=self.llm.reasoning_model,
        )
        return strip_markdown(text)


class RewriteAgent(BaseAgent):
    """Humanizes, paraphrases or translates a passage."""

    def __init__(self, llm_service):
        super().__init__("rewrite", llm_service)

    @staticmethod
    def build_prompt(mode: RewriteMode, text: str, language: TargetLanguage = TargetLanguage.ENGLISH) -> str:
        if mode == RewriteMode.HUMANIZE:
            task = ("Humanize the following academic text to sound more natural and engaging "
                    "while maintaining formal rigor. Remove robotic patterns.")
        elif mode == RewriteMode.PARAPHRASE:
            task = ("Paraphrase the following academic text using different vocabulary and sentence "
                    "structures while keeping the same meaning and APA citation style.")
        else:
            task = (f"Translate the following academic text into {language.value}, keeping the "
                    "academic register, terminology and in-text citations intact.")
        return f"{task} TEXT: {text}. {CLEAN_TEXT_INSTRUCTION}"

    async def run(self, input_data: dict) -> str:
        prompt = self.build_prompt(
            RewriteMode(input_data["mode"]),
            input_data["text"],
            TargetLanguage(input_data.get("language", TargetLanguage.ENGLISH)),
        )
        return strip_markdown(await self.llm.generate(prompt))


class SuggestionAgent(BaseAgent):
    """Five sentence starters or connectors for a section."""

    def __init__(self, llm_service):
        super().__init__("suggestions", llm_service)

    async def run(self, input_data: dict) -> list[str]:
        prompt = (
            f"Provide 5 academic sentence starters or connectors specifically for the "
            f"'{input_data['section']}' chapter of a research paper. "
            f"Base it on this context: {input_data['text']}."
        )
        try:
            data = await self.llm.generate_json(
                prompt, schema={"type": "array", "items": {"type": "string"}}
            )
        except ValueError as e:
            logger.warning(f"No usable suggestions: {e}")
            return []

        if isinstance(data, dict):
            data = data.get("suggestions", [])
        if not isinstance(data, list):
            return []
        return [strip_markdown(str(s)) for s in data]


def parse_citation_lines(text: str) -> list[str]:
    """One APA citation per line; short lines dropped, list markers removed."""
    return [
        LIST_MARKER.sub("", line).strip()
        for line in text.split("\n")
        if len(line.strip()) > 10
    ]


class CitationAgent(BaseAgent):
    """Finds real papers for a keyword and returns them as APA citations."""

    def __init__(self, llm_service):
        super().__init__("citations", llm_service)

    async def run(self, keyword: str) -> list[str]:
        text = await self.llm.generate(
            f"Find real academic papers (Title, Authors, Year, Journal) for the following research "
            f"keyword: {keyword}. Return as a simple list of APA citations, one per line."
        )
        return parse_citation_lines(strip_markdown(text))
