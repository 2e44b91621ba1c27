from agents.composition_orchestrator import CompositionOrchestrator
from agents.orchestrator import ReviewOrchestrator
from services.llm_service import get_llm_service
from services.session_store import get_review_store, get_workspace_store


def get_review_orchestrator() -> ReviewOrchestrator:
    return ReviewOrchestrator(get_llm_service(), get_review_store())


def get_composition_orchestrator() -> CompositionOrchestrator:
    return CompositionOrchestrator(get_llm_service(), get_workspace_store())
