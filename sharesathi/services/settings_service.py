"""
Display settings store
Theme and font size, persisted like the watchlists
"""
import logging
from typing import Literal, Optional, get_args

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from sharesathi.config import settings
from sharesathi.schemas.watchlist import CamelModel
from sharesathi.services.storage_service import KeyValueStorage

logger = logging.getLogger(__name__)

Theme = Literal["light", "dark"]
FontSize = Literal["normal", "large", "extra-large"]

THEMES = get_args(Theme)
FONT_SIZES = get_args(FontSize)


class DisplaySettings(CamelModel):
    """User display preferences"""
    theme: Theme = "light"
    # large by default, most users read on small phones
    font_size: FontSize = "large"


class SettingsStore:
    """Persisted display settings"""

    def __init__(self, storage: KeyValueStorage, storage_key: Optional[str] = None):
        self.storage = storage
        self.storage_key = storage_key or settings.SETTINGS_STORAGE_KEY
        self._settings = DisplaySettings()

    @property
    def current(self) -> DisplaySettings:
        return self._settings.model_copy()

    def load(self) -> bool:
        try:
            raw = self.storage.get_item(self.storage_key)
        except SQLAlchemyError as e:
            logger.error(f"Reading settings failed, using defaults: {e}")
            return False

        if raw is None:
            return False

        try:
            self._settings = DisplaySettings.model_validate_json(raw)
        except PydanticValidationError:
            logger.warning("Saved settings unreadable, using defaults")
            self._settings = DisplaySettings()
            return False
        return True

    def save(self) -> None:
        try:
            self.storage.set_item(self.storage_key, self._settings.model_dump_json(by_alias=True))
        except SQLAlchemyError as e:
            logger.error(f"Persisting settings failed: {e}")

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            logger.debug(f"Ignoring unknown theme {theme}")
            return
        self._settings = self._settings.model_copy(update={"theme": theme})
        self.save()

    def set_font_size(self, font_size: str) -> None:
        if font_size not in FONT_SIZES:
            logger.debug(f"Ignoring unknown font size {font_size}")
            return
        self._settings = self._settings.model_copy(update={"font_size": font_size})
        self.save()
