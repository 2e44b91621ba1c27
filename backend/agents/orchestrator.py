import logging
from typing import Any, Callable, Optional
from pydantic import BaseModel
from agents.base_agent import AgentResult, BaseAgent
from agents.search_agent import SearchAgent
from agents.capture_agent import CaptureAgent
from agents.synthesis_agent import SynthesisAgent
from agents.report_agent import ReportAgent
from models.session import ReviewSession, ReviewType
from services import workflow
from services.session_store import InMemoryStore
from services.workflow import Action, PaperNotFoundError, WorkflowBusyError

logger = logging.getLogger("orchestrator")

GENERIC_FAILURE = "The AI service could not complete the request. Please try again."


class StepStatus:
    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"


class StepOutcome(BaseModel):
    status: str
    session: ReviewSession
    error: Optional[str] = None


class ReviewOrchestrator:
    """
    Drives a review session through PLAN -> SEARCH -> EXTRACT -> SYNTHESIZE
    -> WRITE -> FINISH. Each external call is awaited before the session moves
    on; a failed call leaves the session on the stage it was on.
    """

    def __init__(self, llm_service, store: InMemoryStore, scholar=None):
        self.llm = llm_service
        self.store = store
        self.agents: dict[str, BaseAgent] = {
            "search": SearchAgent(llm_service, scholar),
            "capture": CaptureAgent(llm_service),
            "synthesis": SynthesisAgent(llm_service),
            "report": ReportAgent(llm_service),
        }

    def create_session(self, topic: str = "", review_type: ReviewType = ReviewType.SLR) -> ReviewSession:
        return self.store.add(ReviewSession(topic=topic, review_type=review_type))

    def get_session(self, session_id: str) -> ReviewSession:
        return self.store.get(session_id)

    def delete_session(self, session_id: str) -> None:
        if self.store.get(session_id).loading:
            raise WorkflowBusyError(f"Session {session_id} is waiting for a previous request")
        self.store.remove(session_id)

    async def _run_step(
        self,
        session: ReviewSession,
        agent_key: str,
        input_data: Any,
        on_success: Callable[[ReviewSession, Any], ReviewSession],
    ) -> StepOutcome:
        self.store.save(workflow.begin_call(session))

        result: AgentResult = await self.agents[agent_key].execute(input_data)

        current = self.store.get(session.id)
        if not result.ok:
            logger.error(f"Session {session.id}: {agent_key} failed at stage {current.stage.name}: {result.error}")
            failed = self.store.save(workflow.call_failed(current))
            return StepOutcome(status=StepStatus.FAILED, session=failed, error=GENERIC_FAILURE)

        updated = self.store.save(on_success(current, result.output))
        return StepOutcome(status=StepStatus.SUCCESS, session=updated)

    async def search(
        self,
        session_id: str,
        query: str,
        review_type: ReviewType = ReviewType.SLR,
        references: str = "",
    ) -> StepOutcome:
        session = self.store.get(session_id)
        submitted = workflow.submit_search(session, query, review_type, references)
        if submitted is session:
            logger.info(f"Session {session_id}: empty research question, search ignored")
            return StepOutcome(status=StepStatus.SKIPPED, session=session)

        self.store.save(submitted)
        return await self._run_step(
            submitted,
            "search",
            {"query": submitted.topic, "review_type": review_type, "references": references},
            lambda s, outcome: workflow.search_completed(s, outcome.papers, outcome.summary),
        )

    async def capture(self, session_id: str, paper_id: str) -> StepOutcome:
        session = self.store.get(session_id)
        workflow.require_action(session, Action.CAPTURE)
        paper = session.find_paper(paper_id)
        if paper is None:
            raise PaperNotFoundError(f"Paper {paper_id} is not part of session {session_id}")

        return await self._run_step(
            session,
            "capture",
            paper,
            lambda s, details: workflow.paper_captured(s, paper_id, details),
        )

    async def synthesize(self, session_id: str) -> StepOutcome:
        session = self.store.get(session_id)
        workflow.require_action(session, Action.SYNTHESIZE)
        return await self._run_step(session, "synthesis", session, workflow.synthesis_completed)

    async def write(self, session_id: str) -> StepOutcome:
        session = self.store.get(session_id)
        workflow.require_action(session, Action.WRITE)
        return await self._run_step(session, "report", session, workflow.draft_completed)

    def finalize(self, session_id: str) -> StepOutcome:
        session = self.store.save(workflow.finalize(self.store.get(session_id)))
        return StepOutcome(status=StepStatus.SUCCESS, session=session)

    def reset(self, session_id: str) -> StepOutcome:
        session = self.store.save(workflow.reset(self.store.get(session_id)))
        return StepOutcome(status=StepStatus.SUCCESS, session=session)
