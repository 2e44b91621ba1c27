import re
import json
import logging
import asyncio
from typing import Optional
from openai import OpenAI
from config import get_settings

logger = logging.getLogger("llm_service")

CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$")
JSON_BLOCK = re.compile(r"[\[{][\s\S]*[\]}]")
JSON_ONLY = (
    "Respond ONLY with valid JSON. No markdown, no code blocks, no explanation. "
    "Just the raw JSON object or array."
)


def parse_json_response(response: str):
    """
    Parse a model reply that should be JSON.

    Code fences are stripped first. If what remains still is not JSON, the
    outermost object or array inside the reply is tried before giving up
    with ValueError.
    """
    cleaned = CODE_FENCE.sub("", response.strip())
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        match = JSON_BLOCK.search(cleaned)
        if match:
            try:
                return json.loads(match.group(0))
            except json.JSONDecodeError:
                pass
        logger.error(f"JSON parse error: {e}\nResponse: {cleaned[:500]}")
        raise ValueError(f"LLM returned invalid JSON: {e}")


def schema_format(schema: Optional[dict]) -> Optional[dict]:
    """``response_format`` constraining the reply to ``schema``, if one is given."""
    if schema is None:
        return None
    return {"type": "json_schema", "json_schema": {"name": "response", "schema": schema}}


class LLMService:
    """
    Text generation over an OpenAI-compatible chat endpoint (Gemini by default).

    ``model`` answers the quick stages; ``reasoning_model`` is passed explicitly
    by the agents that synthesize or write long-form text.
    """

    def __init__(self):
        settings = get_settings()
        self.client = OpenAI(base_url=settings.LLM_BASE_URL, api_key=settings.LLM_API_KEY or "unset")
        self.model = settings.LLM_FAST_MODEL
        self.reasoning_model = settings.LLM_REASONING_MODEL

    async def generate(
        self,
        prompt: str,
        system_instruction: str = "",
        temperature: float = 0.7,
        max_tokens: int = 8192,
        model: Optional[str] = None,
        response_format: Optional[dict] = None,
    ) -> str:
        messages = [{"role": "system", "content": system_instruction}] if system_instruction else []
        messages.append({"role": "user", "content": prompt})
        extra = {"response_format": response_format} if response_format else {}
        model = model or self.model

        try:
            response = await asyncio.to_thread(
                self.client.chat.completions.create,
                model=model,
                messages=messages,
                temperature=temperature,
                max_completion_tokens=max_tokens,
                **extra,
            )
        except Exception as e:
            logger.error(f"LLM generation error ({model}): {e}")
            raise
        return response.choices[0].message.content or ""

    async def generate_json(
        self,
        prompt: str,
        system_instruction: str = "",
        schema: Optional[dict] = None,
        temperature: float = 0.2,
        max_tokens: int = 8192,
        model: Optional[str] = None,
    ):
        """Structured output; raises ValueError when the reply is not JSON."""
        response = await self.generate(
            prompt,
            system_instruction=f"{system_instruction}\n\n{JSON_ONLY}".strip(),
            temperature=temperature,
            max_tokens=max_tokens,
            model=model,
            response_format=schema_format(schema),
        )
        return parse_json_response(response)


_llm_service = None


def get_llm_service() -> LLMService:
    global _llm_service
    if _llm_service is None:
        _llm_service = LLMService()
    return _llm_service
