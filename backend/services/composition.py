import logging
from typing import Optional
from models.analysis import AnalysisResult
from models.composition import (
    CompositionWorkspace,
    ResearchContext,
    ScopusQuartile,
    SectionType,
    TextTarget,
)
from services.workflow import WorkflowBusyError

logger = logging.getLogger("composition")

ANALYSIS_TOPIC = "Research Data Analysis"


def _update(workspace: CompositionWorkspace, **changes) -> CompositionWorkspace:
    return workspace.model_copy(update=changes)


def _with_section(workspace: CompositionWorkspace, section: SectionType, text: str, **changes) -> CompositionWorkspace:
    sections = dict(workspace.sections)
    sections[section] = text
    return _update(workspace, sections=sections, **changes)


def merge_review_context(previous: Optional[ResearchContext], incoming: ResearchContext) -> ResearchContext:
    """A finished review overrides the shared context, keeping the old topic if it has none."""
    topic = incoming.topic or (previous.topic if previous else "")
    analysis = incoming.analysis_result or (previous.analysis_result if previous else None)
    return incoming.model_copy(update={"topic": topic, "analysis_result": analysis})


def merge_analysis_context(previous: Optional[ResearchContext], result: AnalysisResult) -> ResearchContext:
    if previous is None:
        return ResearchContext(topic=ANALYSIS_TOPIC, analysis_result=result)
    return previous.model_copy(update={
        "topic": previous.topic or ANALYSIS_TOPIC,
        "analysis_result": result,
    })


def format_analysis(result: AnalysisResult) -> str:
    return f"ANALISIS DATA:\nSummary: {result.summary}\nInsights: {', '.join(result.insights)}"


def apply_context(workspace: CompositionWorkspace, context: ResearchContext) -> CompositionWorkspace:
    """Seed the studio sections from the shared research context."""
    require_idle(workspace)
    sections = dict(workspace.sections)
    lr = context.draft or context.synthesis
    if lr:
        sections[SectionType.LR] = lr
    if context.references:
        sections[SectionType.REFS] = context.references
    if context.analysis_result is not None:
        sections[SectionType.ANALYSIS] = format_analysis(context.analysis_result)
    return _update(workspace, sections=sections, context=context)


def select_section(workspace: CompositionWorkspace, section: SectionType) -> CompositionWorkspace:
    return _update(workspace, active_section=section)


def set_quartile(workspace: CompositionWorkspace, quartile: ScopusQuartile) -> CompositionWorkspace:
    return _update(workspace, quartile=quartile)


def require_idle(workspace: CompositionWorkspace) -> None:
    if workspace.loading:
        raise WorkflowBusyError(f"Workspace {workspace.id} is waiting for a previous request")


def set_section_text(workspace: CompositionWorkspace, section: SectionType, text: str) -> CompositionWorkspace:
    require_idle(workspace)
    return _with_section(workspace, section, text)


def target_text(workspace: CompositionWorkspace, start: int = 0, end: int = 0) -> TextTarget:
    """The selected slice of the active section, or the whole section when nothing is selected."""
    full = workspace.active_text
    start = max(0, min(start, len(full)))
    end = max(start, min(end, len(full)))
    selected = full[start:end]
    return TextTarget(
        section=workspace.active_section,
        source=full,
        text=selected or full,
        is_selection=bool(selected),
        start=start,
        end=end,
    )


def replace_target(workspace: CompositionWorkspace, new_text: str, target: TextTarget) -> CompositionWorkspace:
    """Write a tool result back into the section the call was issued for."""
    if target.is_selection:
        new_text = target.source[:target.start] + new_text + target.source[target.end:]
    return _with_section(workspace, target.section, new_text, loading=False)


def append_generated(
    workspace: CompositionWorkspace,
    generated: str,
    section: Optional[SectionType] = None,
) -> CompositionWorkspace:
    section = section or workspace.active_section
    return _with_section(
        workspace,
        section,
        workspace.sections.get(section, "") + "\n\n" + generated,
        loading=False,
    )


def insert_snippet(workspace: CompositionWorkspace, snippet: str) -> CompositionWorkspace:
    """Append a suggestion or citation, space-separated from existing text."""
    require_idle(workspace)
    current = workspace.active_text
    return _with_section(
        workspace,
        workspace.active_section,
        current + (" " if current else "") + snippet,
    )


def begin_call(workspace: CompositionWorkspace) -> CompositionWorkspace:
    require_idle(workspace)
    return _update(workspace, loading=True)


def call_finished(workspace: CompositionWorkspace, **changes) -> CompositionWorkspace:
    return _update(workspace, loading=False, **changes)
