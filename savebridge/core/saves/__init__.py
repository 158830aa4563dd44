from core.saves.enumerator import FileEnumeratorService
from core.saves.game import SLIME_RANCHER, GameDefinition
from core.saves.models import FileManifest, ManifestEntry, StorageKind, StoragePaths
from core.saves.path_resolver import resolve_storage_paths

__all__ = [
    "FileEnumeratorService",
    "FileManifest",
    "GameDefinition",
    "ManifestEntry",
    "SLIME_RANCHER",
    "StorageKind",
    "StoragePaths",
    "resolve_storage_paths",
]
