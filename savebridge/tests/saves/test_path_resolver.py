from __future__ import annotations

import pytest

from core.saves.game import SLIME_RANCHER
from core.saves.models import StorageKind
from core.saves.path_resolver import resolve_storage_paths


def test_paths_for_profile(steam_root: str) -> None:
    paths = resolve_storage_paths(steam_root, 12345, SLIME_RANCHER)

    assert paths.cloud_path == "/home/deck/.local/share/Steam/userdata/12345/433340"
    assert paths.compat_path == (
        "/home/deck/.local/share/Steam/steamapps/compatdata/433340/"
        "pfx/drive_c/users/steamuser/AppData/LocalLow/Monomi Park/Slime Rancher"
    )
    assert paths.root_for(StorageKind.CLOUD) == paths.cloud_path
    assert paths.root_for(StorageKind.COMPAT) == paths.compat_path


def test_resolution_is_idempotent(steam_root: str) -> None:
    assert resolve_storage_paths(steam_root, 7, SLIME_RANCHER) == resolve_storage_paths(steam_root, 7, SLIME_RANCHER)


def test_steam_root_is_normalized() -> None:
    paths = resolve_storage_paths("home//deck/Steam/", 0, SLIME_RANCHER)

    assert paths.cloud_path == "/home/deck/Steam/userdata/0/433340"


@pytest.mark.parametrize("account_id", [-1, True, "12", 1.0])
def test_malformed_ids_are_rejected(steam_root: str, account_id: object) -> None:
    with pytest.raises(ValueError):
        resolve_storage_paths(steam_root, account_id, SLIME_RANCHER)  # type: ignore[arg-type]
