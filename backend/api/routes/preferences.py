import logging
from fastapi import APIRouter
from pydantic import BaseModel
from models.preferences import VIEW_TITLES, AppView
from services import preferences
from services.session_store import get_review_store, get_workspace_store

logger = logging.getLogger("api.preferences")
router = APIRouter(prefix="/api/v1/preferences", tags=["preferences"])


class ViewRequest(BaseModel):
    view: AppView


def view_payload(view: AppView) -> dict:
    return {"view": view.value, "title": VIEW_TITLES[view]}


@router.get("/view")
async def get_view():
    """The last active view (Literature Review by default)."""
    return view_payload(await preferences.get_active_view())


@router.put("/view")
async def set_view(body: ViewRequest):
    return view_payload(await preferences.set_active_view(body.view))


@router.delete("")
async def reset_storage():
    """Recovery reset: forget stored preferences and every in-memory session."""
    await preferences.clear_preferences()
    get_review_store().clear()
    get_workspace_store().clear()
    logger.warning("Storage reset: preferences, review sessions and workspaces cleared")
    return {"status": "reset", **view_payload(await preferences.get_active_view())}
