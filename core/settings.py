from __future__ import annotations
import os
import functools
import yaml
from pathlib import Path
from typing import Dict, List
from pydantic import BaseModel, Field

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[1] / "config" / "settings.yaml"
SETTINGS_ENV_VAR = "SCHOOL_ADMIN_SETTINGS"

class AppConfig(BaseModel):
    name: str
    environment: str = "development"
    debug: bool = False

class ApiConfig(BaseModel):
    base_url: str
    session_cookie: str = "token"
    verify_tls: bool = True

class UIConfig(BaseModel):
    notification_ttl_seconds: float = 1.5
    dialog_close_delay_seconds: float = 1.5
    max_notifications: int = 20

class RBACConfig(BaseModel):
    roles: List[str] = Field(default_factory=lambda: ["admin", "staff", "librarian"])
    read_only_roles: List[str] = Field(default_factory=lambda: ["librarian"])
    page_access: Dict[str, List[str]] = Field(default_factory=dict)

class Settings(BaseModel):
    app: AppConfig
    api: ApiConfig
    ui: UIConfig = Field(default_factory=UIConfig)
    rbac: RBACConfig = Field(default_factory=RBACConfig)

def _resolve_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    env_path = os.environ.get(SETTINGS_ENV_VAR, "").strip()
    return Path(env_path) if env_path else DEFAULT_SETTINGS_PATH

def read_settings(path: str | Path | None = None) -> Settings:
    """Parse the settings file without caching. Raises on a missing or invalid file."""
    with open(_resolve_path(path), "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    return Settings(
        app=AppConfig(**data["app"]),
        api=ApiConfig(**data["api"]),
        ui=UIConfig(**(data.get("ui") or {})),
        rbac=RBACConfig(**(data.get("rbac") or {})),
    )

@functools.lru_cache(maxsize=4)
def load_settings(path: str | Path | None = None) -> Settings:
    return read_settings(path)
