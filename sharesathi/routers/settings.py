"""
Display settings API routes
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from sharesathi.dependencies import get_settings_store
from sharesathi.schemas.watchlist import CamelModel
from sharesathi.services.settings_service import DisplaySettings, FontSize, SettingsStore, Theme

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings", tags=["Settings"])


class SettingsUpdate(CamelModel):
    """Partial settings update, unknown values rejected with 422"""
    theme: Optional[Theme] = None
    font_size: Optional[FontSize] = None


@router.get("", response_model=DisplaySettings, summary="Get display settings")
def get_settings(store: SettingsStore = Depends(get_settings_store)):
    return store.current


@router.put("", response_model=DisplaySettings, summary="Update display settings")
def update_settings(
    data: SettingsUpdate,
    store: SettingsStore = Depends(get_settings_store),
):
    if data.theme is not None:
        store.set_theme(data.theme)
    if data.font_size is not None:
        store.set_font_size(data.font_size)

    logger.info(f"API: settings now {store.current.model_dump()}")
    return store.current
