"""Persisted settings for title generation."""

import json
import os
from pathlib import Path
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import ConfigurationError

logger = structlog.get_logger()

DEFAULT_MODEL_ID = "gemini-2.5-flash-preview-04-17"
DEFAULT_SETTINGS_PATH = Path("~/.text-titler/settings.json")

_API_KEY_ENV_VARS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")


class Settings(BaseModel):
    """Title generator settings, stored with camelCase keys."""

    model_config = ConfigDict(
        populate_by_name=True, validate_assignment=True, protected_namespaces=()
    )

    api_key: str = Field(default="", alias="apiKey")
    model_id: str = Field(default=DEFAULT_MODEL_ID, alias="modelId")
    number_of_sentences: int = Field(default=8, gt=0, alias="numberOfSentences")
    auto_update_untitled_notes: bool = Field(default=False, alias="autoUpdateUntitledNotes")

    @field_validator("model_id")
    @classmethod
    def validate_model_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Model ID must not be empty")
        return v

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError(
                "Gemini API key is not set. Please configure it in the settings."
            )
        return self.api_key


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load settings from JSON, layering file values over defaults.

    A missing file yields defaults. An empty API key is filled from
    GEMINI_API_KEY or GOOGLE_API_KEY when either is set.
    """
    path = (path or DEFAULT_SETTINGS_PATH).expanduser()
    data: dict = {}
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Settings file {path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings file {path} must contain a JSON object")

    try:
        settings = Settings.model_validate(data)
    except ValueError as e:
        raise ConfigurationError(f"Invalid settings in {path}: {e}") from e

    if not settings.api_key:
        for env_var in _API_KEY_ENV_VARS:
            value = os.getenv(env_var)
            if value:
                settings.api_key = value
                logger.debug("api_key_from_env", env_var=env_var)
                break
    return settings


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    path = (path or DEFAULT_SETTINGS_PATH).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.model_dump(by_alias=True), indent=2), encoding="utf-8")
    logger.info("settings_saved", path=str(path))
    return path
