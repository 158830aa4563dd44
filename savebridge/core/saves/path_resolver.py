from __future__ import annotations

from core.remote.commands import join_remote, normalize_remote_path
from core.saves.game import GameDefinition
from core.saves.models import StoragePaths

USERDATA_DIR = "userdata"
COMPATDATA_DIR = "steamapps/compatdata"
LOGIN_RECORD_PATH = "config/loginusers.vdf"


def userdata_root(steam_root: str) -> str:
    return join_remote(normalize_remote_path(steam_root), USERDATA_DIR)


def compat_app_root(steam_root: str, game: GameDefinition) -> str:
    return join_remote(normalize_remote_path(steam_root), COMPATDATA_DIR, game.app_id)


def login_record_path(steam_root: str) -> str:
    return join_remote(normalize_remote_path(steam_root), LOGIN_RECORD_PATH)


def resolve_storage_paths(steam_root: str, account_id: int, game: GameDefinition) -> StoragePaths:
    if isinstance(account_id, bool) or not isinstance(account_id, int):
        raise ValueError("account_id must be an integer")
    if account_id < 0:
        raise ValueError("account_id must not be negative")

    return StoragePaths(
        cloud_path=join_remote(userdata_root(steam_root), str(account_id), game.app_id),
        compat_path=join_remote(compat_app_root(steam_root, game), game.compat_save_subpath),
    )
