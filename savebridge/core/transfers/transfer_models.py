from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from core.backups.backup_service import BackupOutcome
from core.profiles.models import Profile
from core.remote.client_base import Host
from core.saves.models import FileManifest, StorageKind, StoragePaths


class TransferState(str, Enum):
    INIT = "init"
    CONNECTIVITY_CHECK = "connectivity_check"
    DISCOVER_SOURCE = "discover_source"
    DISCOVER_DEST = "discover_dest"
    SELECT_SOURCE = "select_source"
    SELECT_DEST = "select_dest"
    ENUMERATE_SOURCE = "enumerate_source"
    BACKUP_DEST = "backup_dest"
    PREPARE_DEST = "prepare_dest"
    COPY = "copy"
    VERIFY = "verify"
    DONE = "done"


@dataclass(slots=True)
class TransferOptions:
    source_profile_name: str | None = None
    dest_profile_name: str | None = None
    dry_run: bool = False
    create_backup: bool = False
    list_only: bool = False
    non_interactive: bool = False
    missing_dest_profile: str = "fail"


@dataclass(frozen=True, slots=True)
class TransferPlan:
    source_host: Host
    source_profile: Profile
    source_paths: StoragePaths
    dest_host: Host
    dest_profile: Profile
    dest_paths: StoragePaths
    manifest: FileManifest


@dataclass(frozen=True, slots=True)
class CopyOperation:
    kind: StorageKind
    source_path: str
    dest_path: str
    size_bytes: int | None = None


@dataclass(slots=True)
class CopyFailure:
    source_path: str
    message: str


@dataclass(slots=True)
class TransferResult:
    state: TransferState
    dry_run: bool = False
    source_profiles: list[Profile] = field(default_factory=list)
    dest_profiles: list[Profile] = field(default_factory=list)
    plan: TransferPlan | None = None
    operations: list[CopyOperation] = field(default_factory=list)
    backups: list[BackupOutcome] = field(default_factory=list)
    files_copied: int = 0
    failures: list[CopyFailure] = field(default_factory=list)
    verified_files: int = 0

    @property
    def files_failed(self) -> int:
        return len(self.failures)

    @property
    def partial_failure(self) -> bool:
        return bool(self.failures)
