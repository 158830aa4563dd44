from __future__ import annotations

import logging

from core.remote import commands
from core.remote.client_base import Host, RemoteExecutor
from core.saves.game import GameDefinition
from core.saves.models import FileManifest, ManifestEntry, StorageKind, StoragePaths
from i18n.i18n import tr


class FileEnumeratorService:
    def __init__(
        self,
        executor: RemoteExecutor,
        game: GameDefinition,
        logger: logging.Logger | None = None,
    ) -> None:
        self._executor = executor
        self._game = game
        self._logger = logger or logging.getLogger("savebridge.saves")

    async def enumerate(self, host: Host, paths: StoragePaths) -> FileManifest:
        entries: list[ManifestEntry] = []
        for kind, root in paths.items():
            found = await self._list_root(host, kind, root)
            if found:
                self._logger.debug("Found %s %s files under %s", len(found), kind.value, root)
            entries.extend(found)

        manifest = FileManifest(entries=tuple(entries))
        if manifest.is_empty:
            self._logger.warning(tr("enumerate.none", host=host.label))
        else:
            self._logger.info(tr("enumerate.found", count=manifest.count, size=manifest.total_size_bytes, host=host.label))
        return manifest

    async def _list_root(self, host: Host, kind: StorageKind, root: str) -> list[ManifestEntry]:
        result = await self._executor.execute(host, commands.find_files(root, self._game.name_patterns()))
        if not result.ok and result.output.strip() == "":
            return []

        entries: list[ManifestEntry] = []
        for line in result.lines():
            size_bytes, path = _split_listing_line(line)
            if not path.startswith(root.rstrip("/") + "/"):
                continue
            entries.append(ManifestEntry(path=path, kind=kind, root=root, size_bytes=size_bytes))

        entries.sort(key=lambda entry: entry.path)
        return entries


def _split_listing_line(line: str) -> tuple[int | None, str]:
    size_text, separator, path = line.partition("\t")
    if separator == "":
        return None, line.strip()
    try:
        return int(size_text), path
    except ValueError:
        return None, line.strip()
