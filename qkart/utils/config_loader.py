"""
Storefront configuration loader (backend endpoint, timeouts, search, session).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

_ENV_OVERRIDES = {
    "QKART_BACKEND_SCHEME": ("backend", "scheme"),
    "QKART_BACKEND_HOST": ("backend", "host"),
    "QKART_BACKEND_PORT": ("backend", "port"),
    "QKART_TIMEOUT_SECONDS": ("backend", "timeout_seconds"),
    "QKART_INTEGRATIONS_MODE": ("backend", "mode"),
    "QKART_SESSION_FILE": ("session", "path"),
}


class BackendConfig(BaseModel):
    mode: Literal["mock", "real"] = "real"
    scheme: Literal["http", "https"] = "http"
    host: str = "localhost"
    port: int = Field(default=8082, ge=1, le=65535)
    api_prefix: str = "/api/v1"
    timeout_seconds: float = Field(default=10.0, gt=0)

    @property
    def endpoint(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}{self.api_prefix}"


class SearchConfig(BaseModel):
    debounce_ms: int = Field(default=300, ge=0, le=10_000)


class SessionConfig(BaseModel):
    # No path means the session lives in memory for the process lifetime.
    path: Optional[str] = None


class StorefrontConfig(BaseModel):
    backend: BackendConfig = Field(default_factory=BackendConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)

    @property
    def endpoint(self) -> str:
        return self.backend.endpoint


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is None or value == "":
            continue
        data.setdefault(section, {})[key] = value
    return data


def load_storefront_config(config_path: Optional[Path] = None) -> StorefrontConfig:
    """
    Load and validate storefront configuration from YAML, then apply QKART_* env overrides.

    Args:
        config_path: Path to config file. Defaults to config/storefront_config.yml

    Returns:
        Validated StorefrontConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValidationError: If config doesn't match schema
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "storefront_config.yml"

    if not config_path.exists():
        raise FileNotFoundError(f"Storefront config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    # An empty section in YAML reads as None; fall back to its defaults.
    data = {key: value for key, value in data.items() if value is not None}

    data = _apply_env_overrides(data)

    try:
        cfg = StorefrontConfig(**data)
        logger.info("Successfully loaded storefront config from %s", config_path)
        return cfg
    except ValidationError as e:
        logger.error("Storefront config validation failed: %s", e)
        raise
