import logging
from sqlalchemy import delete, select
from db.database import async_session
from db.models import Preference
from models.preferences import DEFAULT_VIEW, VIEW_PREFERENCE_KEY, AppView

logger = logging.getLogger("preferences")


async def get_active_view() -> AppView:
    """The last active view, or the default when nothing (valid) is stored."""
    async with async_session() as session:
        pref = (await session.execute(
            select(Preference).where(Preference.key == VIEW_PREFERENCE_KEY)
        )).scalar_one_or_none()

    if pref is None:
        return DEFAULT_VIEW
    try:
        return AppView(pref.value)
    except ValueError:
        logger.warning(f"Ignoring unknown stored view: {pref.value!r}")
        return DEFAULT_VIEW


async def set_active_view(view: AppView) -> AppView:
    async with async_session() as session:
        pref = (await session.execute(
            select(Preference).where(Preference.key == VIEW_PREFERENCE_KEY)
        )).scalar_one_or_none()
        if pref is None:
            session.add(Preference(key=VIEW_PREFERENCE_KEY, value=view.value))
        else:
            pref.value = view.value
        await session.commit()
    return view


async def clear_preferences() -> None:
    async with async_session() as session:
        await session.execute(delete(Preference))
        await session.commit()
    logger.info("Cleared stored preferences")
