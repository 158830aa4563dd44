from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.paths import get_config_path
from core.saves.game import SLIME_RANCHER, GameDefinition


class AppConfig:
    _SUPPORTED_DEST_POLICIES = {"fail", "use_single"}

    _DEFAULTS: dict[str, Any] = {
        "language": "en",
        "ssh_user": "deck",
        "ssh_port": 22,
        "connect_timeout_seconds": 10.0,
        "verify_host_key": True,
        "steam_root": "/home/deck/.local/share/Steam",
        "missing_dest_profile": "fail",
        "game": {},
    }

    def __init__(self, config_path: Path | None = None) -> None:
        self._config_path = config_path or get_config_path()
        self._data: dict[str, Any] = {}
        self._load_or_create()

    @property
    def path(self) -> Path:
        return self._config_path

    def _load_or_create(self) -> None:
        if not self._config_path.exists():
            self._data = dict(self._DEFAULTS)
            self.save()
            return

        try:
            content = self._config_path.read_text(encoding="utf-8")
            loaded = json.loads(content)
            if not isinstance(loaded, dict):
                loaded = {}
        except (json.JSONDecodeError, OSError):
            loaded = {}

        self._data = dict(self._DEFAULTS)
        self._data.update(loaded)

        policy = str(self._data.get("missing_dest_profile", "")).strip().lower()
        if policy not in self._SUPPORTED_DEST_POLICIES:
            policy = self._DEFAULTS["missing_dest_profile"]
        self._data["missing_dest_profile"] = policy

    def save(self) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        self._config_path.write_text(
            json.dumps(self._data, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.save()

    def get_language(self) -> str:
        return str(self._data.get("language", self._DEFAULTS["language"]))

    def get_ssh_user(self) -> str:
        value = str(self._data.get("ssh_user", "")).strip()
        return value or self._DEFAULTS["ssh_user"]

    def get_ssh_port(self) -> int:
        try:
            port = int(self._data.get("ssh_port", self._DEFAULTS["ssh_port"]))
        except (TypeError, ValueError):
            return self._DEFAULTS["ssh_port"]
        if port < 1 or port > 65535:
            return self._DEFAULTS["ssh_port"]
        return port

    def get_connect_timeout(self) -> float:
        try:
            timeout = float(self._data.get("connect_timeout_seconds", self._DEFAULTS["connect_timeout_seconds"]))
        except (TypeError, ValueError):
            return self._DEFAULTS["connect_timeout_seconds"]
        if timeout <= 0:
            return self._DEFAULTS["connect_timeout_seconds"]
        return timeout

    def get_verify_host_key(self) -> bool:
        return bool(self._data.get("verify_host_key", self._DEFAULTS["verify_host_key"]))

    def get_steam_root(self) -> str:
        value = str(self._data.get("steam_root", "")).strip()
        return value or self._DEFAULTS["steam_root"]

    def get_missing_dest_profile_policy(self) -> str:
        return str(self._data.get("missing_dest_profile", self._DEFAULTS["missing_dest_profile"]))

    def get_game(self) -> GameDefinition:
        raw = self._data.get("game", {})
        if not isinstance(raw, dict) or not raw:
            return SLIME_RANCHER
        return GameDefinition.from_mapping(raw, base=SLIME_RANCHER)
