import logging
from typing import Optional
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from urllib.parse import quote
from agents.composition_orchestrator import CompositionOrchestrator
from agents.orchestrator import ReviewOrchestrator, StepOutcome
from api.dependencies import get_composition_orchestrator, get_review_orchestrator
from models.preferences import AppView
from models.session import STAGE_DESCRIPTIONS, ReviewSession, ReviewType
from services import exporter, preferences
from services.report_parser import parse_report
from services.workflow import Action, available_actions, require_action

logger = logging.getLogger("api.reviews")
router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


class CreateReviewRequest(BaseModel):
    topic: str = ""
    review_type: ReviewType = ReviewType.SLR


class SearchRequest(BaseModel):
    query: str = ""
    review_type: ReviewType = ReviewType.SLR
    references: str = ""


class TransferRequest(BaseModel):
    workspace_id: Optional[str] = None


def session_view(session: ReviewSession) -> dict:
    return {
        "session": session.model_dump(mode="json"),
        "stage": {
            "id": int(session.stage),
            "label": session.stage.name,
            "description": STAGE_DESCRIPTIONS[session.stage],
            "progress_percent": session.progress_percent,
        },
        "actions": [a.value for a in available_actions(session)],
        "report": parse_report(session.draft).model_dump(),
    }


def outcome_view(outcome: StepOutcome) -> dict:
    return {"status": outcome.status, "error": outcome.error, **session_view(outcome.session)}


def _attachment(filename: str) -> dict:
    return {"Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"}


@router.post("")
async def create_review(
    body: CreateReviewRequest,
    orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator),
):
    """Start a new review project at the PLAN stage."""
    return session_view(orchestrator.create_session(body.topic, body.review_type))


@router.get("/{session_id}")
async def get_review(session_id: str, orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator)):
    return session_view(orchestrator.get_session(session_id))


@router.delete("/{session_id}")
async def delete_review(session_id: str, orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator)):
    """Forget a review session. Rejected while one of its calls is running."""
    orchestrator.delete_session(session_id)
    return {"status": "deleted", "id": session_id}


@router.post("/{session_id}/search")
async def search(
    session_id: str,
    body: SearchRequest,
    orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator),
):
    """Submit the research question. A blank question is ignored."""
    outcome = await orchestrator.search(session_id, body.query, body.review_type, body.references)
    return outcome_view(outcome)


@router.post("/{session_id}/papers/{paper_id}/capture")
async def capture_paper(
    session_id: str,
    paper_id: str,
    orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator),
):
    """Deep-capture methodology, findings and citation for one paper."""
    outcome = await orchestrator.capture(session_id, paper_id)
    paper = outcome.session.find_paper(paper_id)
    return {**outcome_view(outcome), "paper": paper.model_dump(mode="json") if paper else None}


@router.post("/{session_id}/synthesize")
async def synthesize(session_id: str, orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator)):
    return outcome_view(await orchestrator.synthesize(session_id))


@router.post("/{session_id}/write")
async def write(session_id: str, orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator)):
    return outcome_view(await orchestrator.write(session_id))


@router.post("/{session_id}/finalize")
async def finalize(session_id: str, orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator)):
    return outcome_view(orchestrator.finalize(session_id))


@router.post("/{session_id}/reset")
async def reset(session_id: str, orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator)):
    """Start a new project: back to PLAN with papers, synthesis and draft discarded."""
    return outcome_view(orchestrator.reset(session_id))


@router.get("/{session_id}/report")
async def get_report(session_id: str, orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator)):
    session = orchestrator.get_session(session_id)
    return parse_report(session.draft).model_dump()


@router.get("/{session_id}/export/text")
async def export_text(session_id: str, orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator)):
    session = orchestrator.get_session(session_id)
    require_action(session, Action.EXPORT)
    return Response(
        content=exporter.render_text(session),
        media_type="text/plain; charset=utf-8",
        headers=_attachment(exporter.report_filename(session, "txt")),
    )


@router.get("/{session_id}/export/doc")
async def export_doc(session_id: str, orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator)):
    session = orchestrator.get_session(session_id)
    require_action(session, Action.EXPORT)
    return Response(
        content=exporter.render_word_document(session),
        media_type="application/msword",
        headers=_attachment(exporter.report_filename(session, "doc")),
    )


@router.post("/{session_id}/transfer")
async def transfer(
    session_id: str,
    body: TransferRequest,
    orchestrator: ReviewOrchestrator = Depends(get_review_orchestrator),
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    """Hand the finished review over to the writing studio and switch to it."""
    session = orchestrator.get_session(session_id)
    require_action(session, Action.TRANSFER)
    workspace = studio.transfer_review(session, body.workspace_id)
    view = await preferences.set_active_view(AppView.COMPOSITION)
    return {"view": view.value, "workspace": workspace.model_dump(mode="json")}
