from typing import Any, List
import json
import os
from pydantic import BaseModel, Field
from loguru import logger
from .events import Signal

DEFAULT_REQUIRED_SERVICES = ["blog", "crypto", "court", "theme", "space", "notification"]


# --- Settings Models ---
class GeneralSettings(BaseModel):
    app_name: str = "Portal"
    debug_mode: bool = True
    log_dir: str = "logs"
    theme: str = "light"


class StorageSettings(BaseModel):
    path: str = "data/store.json"


class BootstrapSettings(BaseModel):
    required_services: List[str] = Field(default_factory=lambda: list(DEFAULT_REQUIRED_SERVICES))
    # Components whose mount point only exists once their page is shown
    deferred_components: List[str] = Field(default_factory=lambda: ["court"])
    loading_screen_id: str = "loading-screen"
    loading_text_selector: str = ".loading-text"
    theme_toggle_id: str = "theme-toggle"
    failure_message: str = "Initialization failed. Please refresh."
    # Pages reachable from the nav bar; a component page of the same name is always added
    pages: List[str] = Field(default_factory=lambda: ["home", "space"])


class SpaceSettings(BaseModel):
    api_key: str = "DEMO_KEY"
    apod_url: str = "https://api.nasa.gov/planetary/apod"
    days: int = 10
    limit: int = 8


class DownloadSettings(BaseModel):
    directory: str = "downloads"


class AppConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    bootstrap: BootstrapSettings = Field(default_factory=BootstrapSettings)
    space: SpaceSettings = Field(default_factory=SpaceSettings)
    downloads: DownloadSettings = Field(default_factory=DownloadSettings)


# --- Manager ---
class ConfigManager:
    """
    Manages application configuration with persistence and reactivity.

    Pass ``filepath=None`` for an in-memory configuration that is never saved.
    """
    def __init__(self, filepath: str = "config.json"):
        self.filepath = filepath
        self._data = AppConfig()
        self.on_changed = Signal("ConfigChanged")
        self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and emit change event."""
        if not hasattr(self._data, section):
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if key not in type(section_obj).model_fields:
            raise ValueError(f"Invalid key: {key} in section {section}")

        validated = type(section_obj).model_validate({**section_obj.model_dump(), key: value})
        setattr(self._data, section, validated)
        self._save()
        self.on_changed.emit(section, key, getattr(validated, key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if not self.filepath:
            return
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = AppConfig.model_validate(raw)
            except Exception as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
                self._save()
        else:
            self._save()

    def _save(self):
        """Persist current config to JSON file."""
        if not self.filepath or self.filepath.endswith('.toml'):
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except OSError as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")
