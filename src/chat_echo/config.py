"""
Settings — config file overlaid by environment variables.

Config file: ~/.chat-echo/config.json
Environment: GOOGLE_CLOUD_PROJECT / GCLOUD_PROJECT, FIRESTORE_EMULATOR_HOST,
CHAT_ECHO_DATABASE, CHAT_ECHO_TOKEN.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel

from chat_echo.errors import ConfigError

CONFIG_FILE = Path.home() / ".chat-echo" / "config.json"
DEFAULT_DATABASE = "(default)"
FIRESTORE_BASE_URL = "https://firestore.googleapis.com/v1"

ENV_VARS = {
    "project_id": ("GOOGLE_CLOUD_PROJECT", "GCLOUD_PROJECT"),
    "emulator_host": ("FIRESTORE_EMULATOR_HOST",),
    "database": ("CHAT_ECHO_DATABASE",),
    "token": ("CHAT_ECHO_TOKEN",),
}


class Settings(BaseModel):
    project_id: Optional[str] = None
    database: str = DEFAULT_DATABASE
    emulator_host: Optional[str] = None
    token: Optional[str] = None

    @property
    def base_url(self) -> str:
        if self.emulator_host:
            return f"http://{self.emulator_host}/v1"
        return FIRESTORE_BASE_URL

    @property
    def documents_path(self) -> str:
        """Resource prefix for documents: projects/{p}/databases/{d}/documents"""
        if not self.project_id:
            raise ConfigError("No project id configured. Set GOOGLE_CLOUD_PROJECT or run `chat-echo config set --project-id`.")
        return f"projects/{self.project_id}/databases/{self.database}/documents"

    @classmethod
    def load(cls, path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """Read the config file, then let environment variables win."""
        values: dict[str, Any] = {k: v for k, v in load_config(path).items() if k in cls.model_fields}
        env = os.environ if environ is None else environ
        for field, names in ENV_VARS.items():
            for name in names:
                if env.get(name):
                    values[field] = env[name]
                    break
        return cls(**values)


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    path = path or CONFIG_FILE
    try:
        return json.loads(path.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def save_config(cfg: dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, indent=2))
