import logging
from typing import Optional
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from agents.composition_orchestrator import CompositionOrchestrator, WorkspaceOutcome
from agents.writing_agent import RewriteMode
from api.dependencies import get_composition_orchestrator
from models.analysis import AnalysisResult
from models.composition import (
    SECTION_LABELS,
    CompositionWorkspace,
    ResearchContext,
    ScopusQuartile,
    SectionType,
    TargetLanguage,
)
from models.preferences import AppView
from services import preferences

logger = logging.getLogger("api.composition")
router = APIRouter(prefix="/api/v1/composition", tags=["composition"])


class CreateWorkspaceRequest(BaseModel):
    context: Optional[ResearchContext] = None


class SectionTextRequest(BaseModel):
    text: str = ""


class SelectSectionRequest(BaseModel):
    section: SectionType


class QuartileRequest(BaseModel):
    quartile: ScopusQuartile


class ComposeRequest(BaseModel):
    prompt: str = ""


class ToolRequest(BaseModel):
    start: int = 0
    end: int = 0
    language: TargetLanguage = TargetLanguage.ENGLISH


class CitationRequest(BaseModel):
    keyword: str = ""
    start: int = 0
    end: int = 0


class InsertRequest(BaseModel):
    text: str


def workspace_view(workspace: CompositionWorkspace) -> dict:
    return {
        "workspace": workspace.model_dump(mode="json"),
        "active_label": SECTION_LABELS[workspace.active_section],
        "section_labels": {s.value: label for s, label in SECTION_LABELS.items()},
    }


def outcome_view(outcome: WorkspaceOutcome) -> dict:
    return {"status": outcome.status, "error": outcome.error, **workspace_view(outcome.workspace)}


@router.post("/workspaces")
async def create_workspace(
    body: CreateWorkspaceRequest,
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    return workspace_view(studio.create_workspace(body.context))


@router.get("/workspaces/{workspace_id}")
async def get_workspace(workspace_id: str, studio: CompositionOrchestrator = Depends(get_composition_orchestrator)):
    return workspace_view(studio.get_workspace(workspace_id))


@router.delete("/workspaces/{workspace_id}")
async def delete_workspace(workspace_id: str, studio: CompositionOrchestrator = Depends(get_composition_orchestrator)):
    studio.delete_workspace(workspace_id)
    return {"status": "deleted", "id": workspace_id}


@router.put("/workspaces/{workspace_id}/sections/{section}")
async def update_section(
    workspace_id: str,
    section: SectionType,
    body: SectionTextRequest,
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    return workspace_view(studio.update_section(workspace_id, section, body.text))


@router.post("/workspaces/{workspace_id}/select")
async def select_section(
    workspace_id: str,
    body: SelectSectionRequest,
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    return workspace_view(studio.select_section(workspace_id, body.section))


@router.post("/workspaces/{workspace_id}/quartile")
async def set_quartile(
    workspace_id: str,
    body: QuartileRequest,
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    return workspace_view(studio.set_quartile(workspace_id, body.quartile))


@router.post("/workspaces/{workspace_id}/compose")
async def compose(
    workspace_id: str,
    body: ComposeRequest,
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    """Generate text for the active section and append it."""
    return outcome_view(await studio.compose(workspace_id, body.prompt))


@router.post("/workspaces/{workspace_id}/tools/{mode}")
async def run_tool(
    workspace_id: str,
    mode: RewriteMode,
    body: ToolRequest,
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    """Humanize, paraphrase or translate the selection (or the whole active section)."""
    return outcome_view(await studio.rewrite(workspace_id, mode, body.start, body.end, body.language))


@router.post("/workspaces/{workspace_id}/suggestions")
async def suggestions(workspace_id: str, studio: CompositionOrchestrator = Depends(get_composition_orchestrator)):
    return outcome_view(await studio.suggest(workspace_id))


@router.post("/workspaces/{workspace_id}/citations")
async def citations(
    workspace_id: str,
    body: CitationRequest,
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    return outcome_view(await studio.find_citations(workspace_id, body.keyword, body.start, body.end))


@router.post("/workspaces/{workspace_id}/insert")
async def insert(
    workspace_id: str,
    body: InsertRequest,
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    """Append a suggestion or citation to the active section."""
    return workspace_view(studio.insert(workspace_id, body.text))


@router.post("/workspaces/{workspace_id}/analysis")
async def attach_analysis(
    workspace_id: str,
    body: AnalysisResult,
    studio: CompositionOrchestrator = Depends(get_composition_orchestrator),
):
    """Bring a data-analysis result into the workspace and switch to the studio."""
    workspace = studio.transfer_analysis(body, workspace_id)
    await preferences.set_active_view(AppView.COMPOSITION)
    return workspace_view(workspace)
