"""Configuration enums and settings for the Umbraco Forum MCP."""

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

__all__ = ["ResponseFormat", "ForumSettings", "load_settings", "DEFAULT_CONFIG_PATH"]

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.json"


class ResponseFormat(str, Enum):
    """Output format for tool responses."""

    MARKDOWN = "markdown"
    JSON = "json"


class ForumSettings(BaseModel):
    """Endpoints and limits shared by every tool."""

    model_config = ConfigDict(extra="ignore")

    forum_base_url: str = Field(default="https://forum.umbraco.com")
    docs_base_url: str = Field(default="https://docs.umbraco.com")
    github_repo: str = Field(default="umbraco/Umbraco-CMS")
    product_name: str = Field(default="Umbraco")
    api_timeout: float = Field(default=30.0, gt=0)
    smart_search_limit: int = Field(default=5, ge=1)
    aggregate_forum_limit: int = Field(default=3, ge=1)
    plain_search_limit: int = Field(default=3, ge=1)

    @property
    def forum_root(self) -> str:
        return self.forum_base_url.rstrip("/")

    @property
    def docs_root(self) -> str:
        return self.docs_base_url.rstrip("/")


# Environment variable -> settings field
ENV_OVERRIDES: dict[str, str] = {
    "FORUM_BASE_URL": "forum_base_url",
    "DOCS_BASE_URL": "docs_base_url",
    "GITHUB_REPO": "github_repo",
    "PRODUCT_NAME": "product_name",
    "API_TIMEOUT": "api_timeout",
}


def _load_config_file(path: Path) -> dict[str, Any]:
    """Read config.json, returning an empty dict when missing or invalid."""
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Could not load {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring {path}: expected a JSON object")
        return {}
    return data


def load_settings(config_path: Optional[Path] = None) -> ForumSettings:
    """
    Build settings from defaults, config.json, then environment variables.

    Args:
        config_path: Explicit config file (defaults to $FORUM_MCP_CONFIG or
            config.json next to the server module)

    Returns:
        Validated ForumSettings
    """
    if config_path is None:
        env_path = os.getenv("FORUM_MCP_CONFIG")
        config_path = Path(env_path) if env_path else DEFAULT_CONFIG_PATH

    values = _load_config_file(config_path)

    for env_key, field_name in ENV_OVERRIDES.items():
        value = os.getenv(env_key, "").strip()
        if value:
            values[field_name] = value

    try:
        return ForumSettings(**values)
    except ValidationError as e:
        logger.warning(f"Invalid forum settings, using defaults: {e}")
        return ForumSettings()
