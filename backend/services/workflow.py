"""
Stage transitions for a literature-review session.

Every function takes a ``ReviewSession`` and returns a new one; nothing here
performs I/O. The orchestrator calls ``begin_call`` before talking to the
language model and exactly one of the ``*_completed`` functions or
``call_failed`` afterwards.
"""

import logging
from enum import Enum
from typing import Iterable
from models.session import CapturedDetails, Paper, ReviewSession, ReviewType, ScreeningMetrics, Stage

logger = logging.getLogger("workflow")


class WorkflowError(Exception):
    """Base class for rejected session actions."""


class TransitionError(WorkflowError):
    pass


class WorkflowBusyError(WorkflowError):
    pass


class PaperNotFoundError(WorkflowError):
    pass


class Action(str, Enum):
    SEARCH = "search"
    CAPTURE = "capture"
    SYNTHESIZE = "synthesize"
    WRITE = "write"
    FINALIZE = "finalize"
    RESET = "reset"
    EXPORT = "export"
    TRANSFER = "transfer"


ACTION_STAGES = {
    Action.SEARCH: (Stage.PLAN, Stage.SEARCH),
    Action.CAPTURE: (Stage.EXTRACT,),
    Action.SYNTHESIZE: (Stage.EXTRACT,),
    Action.WRITE: (Stage.SYNTHESIZE,),
    Action.FINALIZE: (Stage.WRITE,),
    Action.RESET: (Stage.FINISH,),
    Action.EXPORT: (Stage.FINISH,),
    Action.TRANSFER: (Stage.FINISH,),
}


def available_actions(session: ReviewSession) -> list[Action]:
    if session.loading:
        return []
    return [action for action, stages in ACTION_STAGES.items() if session.stage in stages]


def require_action(session: ReviewSession, action: Action) -> None:
    """Raise unless ``action`` may start on this session right now."""
    if session.loading:
        raise WorkflowBusyError(f"Session {session.id} is waiting for a previous request")
    if session.stage not in ACTION_STAGES[action]:
        raise TransitionError(
            f"Cannot {action.value} at stage {session.stage.name}"
        )
    if action == Action.SYNTHESIZE and session.search_summary is None:
        raise TransitionError("Cannot synthesize before search results are available")


def _update(session: ReviewSession, **changes) -> ReviewSession:
    return session.model_copy(update=changes)


def _advance(session: ReviewSession, stage: Stage, **changes) -> ReviewSession:
    if stage < session.stage:
        raise TransitionError(f"Stage cannot move back from {session.stage.name} to {stage.name}")
    if stage != session.stage:
        logger.info(f"Session {session.id}: {session.stage.name} -> {stage.name}")
    return _update(session, stage=stage, **changes)


def begin_call(session: ReviewSession) -> ReviewSession:
    if session.loading:
        raise WorkflowBusyError(f"Session {session.id} is waiting for a previous request")
    return _update(session, loading=True)


def call_failed(session: ReviewSession) -> ReviewSession:
    return _update(session, loading=False)


def submit_search(
    session: ReviewSession,
    query: str,
    review_type: ReviewType,
    references: str = "",
) -> ReviewSession:
    """PLAN -> SEARCH. A blank research question leaves the session untouched."""
    if not query or not query.strip():
        return session
    require_action(session, Action.SEARCH)
    return _advance(
        session,
        Stage.SEARCH,
        topic=query.strip(),
        review_type=review_type,
        references=references or "",
    )


def search_completed(session: ReviewSession, papers: Iterable[Paper], summary: str) -> ReviewSession:
    """SEARCH -> EXTRACT once results are in."""
    if session.stage != Stage.SEARCH:
        raise TransitionError(f"Search results arrived at stage {session.stage.name}")
    papers = tuple(papers)
    return _advance(
        session,
        Stage.EXTRACT,
        papers=papers,
        search_summary=summary,
        metrics=ScreeningMetrics.from_count(len(papers)),
        loading=False,
    )


def paper_captured(session: ReviewSession, paper_id: str, details: CapturedDetails) -> ReviewSession:
    if session.find_paper(paper_id) is None:
        raise PaperNotFoundError(f"Paper {paper_id} is not part of session {session.id}")
    papers = tuple(
        p.model_copy(update={"captured_data": details}) if p.id == paper_id else p
        for p in session.papers
    )
    return _update(session, papers=papers, loading=False)


def synthesis_completed(session: ReviewSession, synthesis: str) -> ReviewSession:
    """EXTRACT -> SYNTHESIZE."""
    if session.stage != Stage.EXTRACT:
        raise TransitionError(f"Synthesis arrived at stage {session.stage.name}")
    return _advance(session, Stage.SYNTHESIZE, synthesis=synthesis, loading=False)


def draft_completed(session: ReviewSession, draft: str) -> ReviewSession:
    """SYNTHESIZE -> WRITE."""
    if session.stage != Stage.SYNTHESIZE:
        raise TransitionError(f"Draft arrived at stage {session.stage.name}")
    return _advance(session, Stage.WRITE, draft=draft, loading=False)


def finalize(session: ReviewSession) -> ReviewSession:
    """WRITE -> FINISH."""
    require_action(session, Action.FINALIZE)
    return _advance(session, Stage.FINISH)


def reset(session: ReviewSession) -> ReviewSession:
    """FINISH -> PLAN, discarding papers, synthesis and draft."""
    require_action(session, Action.RESET)
    logger.info(f"Session {session.id}: {session.stage.name} -> {Stage.PLAN.name} (reset)")
    return ReviewSession(
        id=session.id,
        topic=session.topic,
        review_type=session.review_type,
        references=session.references,
    )
