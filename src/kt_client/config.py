"""
Client configuration, optionally persisted to ~/.kt_client/config.json.

A saved ``session_id`` lets a later process pick the session up again with
``AsyncKTClient.from_config()`` instead of logging in.
"""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

CONFIG_FILE = Path.home() / ".kt_client" / "config.json"

ENV_SERVER = "KT_SERVER"
ENV_SESSION_ID = "KT_SESSION_ID"


class ClientConfig(BaseModel):
    server: str
    application: str = "KTPythonClient"
    ip: Optional[str] = None
    cache_wsdl: str = "disk"
    trace: bool = False
    timeout: float = 30.0
    session_id: Optional[str] = None


def load_config(path: Path = CONFIG_FILE) -> ClientConfig:
    """Read the saved config; KT_SERVER and KT_SESSION_ID override file values."""
    try:
        data = json.loads(path.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        data = {}
    if os.environ.get(ENV_SERVER):
        data["server"] = os.environ[ENV_SERVER]
    if os.environ.get(ENV_SESSION_ID):
        data["session_id"] = os.environ[ENV_SESSION_ID]
    return ClientConfig.model_validate(data)


def save_config(cfg: ClientConfig, path: Path = CONFIG_FILE) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(cfg.model_dump_json(indent=2))
