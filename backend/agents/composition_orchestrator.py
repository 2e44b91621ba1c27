import logging
from typing import Any, Callable, Optional
from pydantic import BaseModel
from agents.base_agent import AgentResult, BaseAgent
from agents.orchestrator import GENERIC_FAILURE, StepStatus
from agents.writing_agent import CitationAgent, ComposeAgent, RewriteAgent, RewriteMode, SuggestionAgent
from models.analysis import AnalysisResult
from models.composition import (
    SECTION_LABELS,
    CompositionWorkspace,
    ResearchContext,
    ScopusQuartile,
    SectionType,
    TargetLanguage,
)
from models.session import ReviewSession
from services import composition
from services.session_store import InMemoryStore

logger = logging.getLogger("composition_orchestrator")


class WorkspaceOutcome(BaseModel):
    status: str
    workspace: CompositionWorkspace
    error: Optional[str] = None


class CompositionOrchestrator:
    """Runs the writing-studio tools against a workspace, one request at a time."""

    def __init__(self, llm_service, store: InMemoryStore):
        self.llm = llm_service
        self.store = store
        self.agents: dict[str, BaseAgent] = {
            "compose": ComposeAgent(llm_service),
            "rewrite": RewriteAgent(llm_service),
            "suggestions": SuggestionAgent(llm_service),
            "citations": CitationAgent(llm_service),
        }

    def create_workspace(self, context: Optional[ResearchContext] = None) -> CompositionWorkspace:
        workspace = CompositionWorkspace()
        if context is not None:
            workspace = composition.apply_context(workspace, context)
        return self.store.add(workspace)

    def get_workspace(self, workspace_id: str) -> CompositionWorkspace:
        return self.store.get(workspace_id)

    def delete_workspace(self, workspace_id: str) -> None:
        composition.require_idle(self.store.get(workspace_id))
        self.store.remove(workspace_id)

    def _target_workspace(self, workspace_id: Optional[str]) -> CompositionWorkspace:
        if workspace_id:
            return self.store.get(workspace_id)
        return self.store.add(CompositionWorkspace())

    def transfer_review(self, session: ReviewSession, workspace_id: Optional[str] = None) -> CompositionWorkspace:
        workspace = self._target_workspace(workspace_id)
        context = composition.merge_review_context(workspace.context, ResearchContext(
            topic=session.topic,
            review_type=session.review_type.value,
            synthesis=session.synthesis,
            draft=session.draft,
            references=session.references,
        ))
        logger.info(f"Transferred review {session.id} into workspace {workspace.id}")
        return self.store.save(composition.apply_context(workspace, context))

    def transfer_analysis(self, result: AnalysisResult, workspace_id: Optional[str] = None) -> CompositionWorkspace:
        workspace = self._target_workspace(workspace_id)
        context = composition.merge_analysis_context(workspace.context, result)
        return self.store.save(composition.apply_context(workspace, context))

    def update_section(self, workspace_id: str, section: SectionType, text: str) -> CompositionWorkspace:
        return self.store.save(composition.set_section_text(self.store.get(workspace_id), section, text))

    def select_section(self, workspace_id: str, section: SectionType) -> CompositionWorkspace:
        return self.store.save(composition.select_section(self.store.get(workspace_id), section))

    def set_quartile(self, workspace_id: str, quartile: ScopusQuartile) -> CompositionWorkspace:
        return self.store.save(composition.set_quartile(self.store.get(workspace_id), quartile))

    def insert(self, workspace_id: str, snippet: str) -> CompositionWorkspace:
        return self.store.save(composition.insert_snippet(self.store.get(workspace_id), snippet))

    async def _run_tool(
        self,
        workspace: CompositionWorkspace,
        agent_key: str,
        input_data: Any,
        on_success: Callable[[CompositionWorkspace, Any], CompositionWorkspace],
    ) -> WorkspaceOutcome:
        self.store.save(composition.begin_call(workspace))

        result: AgentResult = await self.agents[agent_key].execute(input_data)

        current = self.store.get(workspace.id)
        if not result.ok:
            logger.error(f"Workspace {workspace.id}: {agent_key} failed: {result.error}")
            failed = self.store.save(composition.call_finished(current))
            return WorkspaceOutcome(status=StepStatus.FAILED, workspace=failed, error=GENERIC_FAILURE)

        updated = self.store.save(on_success(current, result.output))
        return WorkspaceOutcome(status=StepStatus.SUCCESS, workspace=updated)

    def _skipped(self, workspace: CompositionWorkspace, reason: str) -> WorkspaceOutcome:
        logger.info(f"Workspace {workspace.id}: {reason}")
        return WorkspaceOutcome(status=StepStatus.SKIPPED, workspace=workspace)

    async def compose(self, workspace_id: str, prompt: str) -> WorkspaceOutcome:
        workspace = self.store.get(workspace_id)
        if not prompt or not prompt.strip():
            return self._skipped(workspace, "empty compose prompt")

        section = workspace.active_section
        context = (
            f"Section: {SECTION_LABELS[section]}\n"
            f"Current: {workspace.active_text}\n"
            f"Topic: {workspace.topic or 'Research'}"
        )
        return await self._run_tool(
            workspace,
            "compose",
            {"prompt": f"[TARGET: Scopus {workspace.quartile.value}] {prompt}", "context": context},
            lambda ws, text: composition.append_generated(ws, text, section),
        )

    async def rewrite(
        self,
        workspace_id: str,
        mode: RewriteMode,
        start: int = 0,
        end: int = 0,
        language: TargetLanguage = TargetLanguage.ENGLISH,
    ) -> WorkspaceOutcome:
        workspace = self.store.get(workspace_id)
        target = composition.target_text(workspace, start, end)
        if not target.text:
            return self._skipped(workspace, f"nothing to {mode.value}")

        return await self._run_tool(
            workspace,
            "rewrite",
            {"mode": mode, "text": target.text, "language": language},
            lambda ws, text: composition.replace_target(ws, text, target),
        )

    async def suggest(self, workspace_id: str) -> WorkspaceOutcome:
        workspace = self.store.get(workspace_id)
        return await self._run_tool(
            workspace,
            "suggestions",
            {"section": workspace.active_section.value, "text": workspace.active_text},
            lambda ws, items: composition.call_finished(ws, suggestions=tuple(items)),
        )

    async def find_citations(
        self,
        workspace_id: str,
        keyword: str = "",
        start: int = 0,
        end: int = 0,
    ) -> WorkspaceOutcome:
        workspace = self.store.get(workspace_id)
        target = composition.target_text(workspace, start, end)
        keyword = (target.text if target.is_selection else "") or keyword or workspace.topic
        if not keyword or not keyword.strip():
            return self._skipped(workspace, "no citation keyword")

        return await self._run_tool(
            workspace,
            "citations",
            keyword,
            lambda ws, items: composition.call_finished(ws, citations=tuple(items)),
        )
