from abc import ABC, abstractmethod
from pydantic import BaseModel
from typing import Any, Optional
from config import get_settings
import logging
import time
import asyncio


class AgentStatus:
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class AgentResult(BaseModel):
    """What one agent call produced. ``output`` is only set on success."""

    status: str
    output: Any = None
    error: Optional[str] = None
    attempts: int = 1
    elapsed_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status == AgentStatus.SUCCESS


class BaseAgent(ABC):
    """
    One external-service task behind a uniform ``execute`` call.

    ``execute`` never raises: the last error is logged and returned as a
    failed AgentResult, so callers only branch on ``result.ok``. Extra
    attempts (``AGENT_MAX_RETRIES``) back off exponentially.
    """

    def __init__(
        self,
        name: str,
        llm_service=None,
        max_retries: Optional[int] = None,
        backoff_seconds: float = 2.0,
    ):
        self.name = name
        self.llm = llm_service
        self.logger = logging.getLogger(f"agent.{name}")
        self.status = AgentStatus.IDLE
        self.max_retries = get_settings().AGENT_MAX_RETRIES if max_retries is None else max_retries
        self.backoff_seconds = backoff_seconds

    async def execute(self, input_data: Any) -> AgentResult:
        start = time.time()
        self.status = AgentStatus.RUNNING
        total = self.max_retries + 1
        error = None

        for attempt in range(1, total + 1):
            try:
                output = await self.validate(await self.run(input_data))
            except Exception as e:
                error = e
                self.logger.error(f"[{self.name}] attempt {attempt}/{total} failed: {e}")
                if attempt < total:
                    await asyncio.sleep(self.backoff_seconds * 2 ** (attempt - 1))
                continue

            self.status = AgentStatus.SUCCESS
            elapsed = time.time() - start
            self.logger.info(f"[{self.name}] done in {elapsed:.1f}s (attempt {attempt})")
            return AgentResult(status=AgentStatus.SUCCESS, output=output, attempts=attempt, elapsed_seconds=elapsed)

        self.status = AgentStatus.FAILED
        return AgentResult(
            status=AgentStatus.FAILED,
            error=str(error),
            attempts=total,
            elapsed_seconds=time.time() - start,
        )

    @abstractmethod
    async def run(self, input_data: Any) -> Any:
        ...

    async def validate(self, output: Any) -> Any:
        """Hook for subclasses that need to check the raw output."""
        return output
