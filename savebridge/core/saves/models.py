from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePosixPath


class StorageKind(str, Enum):
    CLOUD = "cloud"
    COMPAT = "compat"


@dataclass(frozen=True, slots=True)
class StoragePaths:
    cloud_path: str
    compat_path: str

    def root_for(self, kind: StorageKind) -> str:
        if kind == StorageKind.CLOUD:
            return self.cloud_path
        return self.compat_path

    def items(self) -> list[tuple[StorageKind, str]]:
        return [(StorageKind.CLOUD, self.cloud_path), (StorageKind.COMPAT, self.compat_path)]


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    path: str
    kind: StorageKind
    root: str
    size_bytes: int | None = None

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def relative_path(self) -> str:
        try:
            return str(PurePosixPath(self.path).relative_to(self.root))
        except ValueError:
            return self.name


@dataclass(frozen=True, slots=True)
class FileManifest:
    entries: tuple[ManifestEntry, ...] = ()

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self.entries]

    @property
    def count(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def total_size_bytes(self) -> int:
        return sum(entry.size_bytes or 0 for entry in self.entries)

    def by_kind(self, kind: StorageKind) -> list[ManifestEntry]:
        return [entry for entry in self.entries if entry.kind == kind]
