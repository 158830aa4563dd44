from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Callable

from core.errors import HostUnreachableError
from core.remote import commands
from core.remote.client_base import Host, RemoteExecutor
from core.saves.models import StorageKind, StoragePaths
from i18n.i18n import tr

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(slots=True)
class BackupOutcome:
    kind: StorageKind
    source_path: str
    backup_path: str
    status: str
    message: str = ""

    @property
    def created(self) -> bool:
        return self.status == "created"


def backup_path_for(path: str, timestamp: str) -> str:
    return f"{path.rstrip('/')}.backup.{timestamp}"


class BackupService:
    def __init__(
        self,
        executor: RemoteExecutor,
        logger: logging.Logger | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._executor = executor
        self._logger = logger or logging.getLogger("savebridge.backups")
        self._clock = clock

    def timestamp(self) -> str:
        return self._clock().strftime(BACKUP_TIMESTAMP_FORMAT)

    def plan(self, paths: StoragePaths, timestamp: str | None = None) -> list[BackupOutcome]:
        stamp = timestamp or self.timestamp()
        return [
            BackupOutcome(kind=kind, source_path=path, backup_path=backup_path_for(path, stamp), status="planned")
            for kind, path in paths.items()
        ]

    async def create_backups(self, host: Host, paths: StoragePaths) -> list[BackupOutcome]:
        stamp = self.timestamp()
        outcomes: list[BackupOutcome] = []

        for planned in self.plan(paths, stamp):
            outcome = await self._backup_one(host, planned)
            outcomes.append(outcome)

        if all(outcome.status == "skipped" for outcome in outcomes):
            self._logger.warning(tr("backup.nothing", host=host.label))
        return outcomes

    async def _backup_one(self, host: Host, planned: BackupOutcome) -> BackupOutcome:
        try:
            return await self._copy_if_present(host, planned)
        except HostUnreachableError as error:
            self._logger.warning(tr("backup.failed", path=planned.source_path, error=error.message))
            return BackupOutcome(
                kind=planned.kind,
                source_path=planned.source_path,
                backup_path=planned.backup_path,
                status="failed",
                message=error.message,
            )

    async def _copy_if_present(self, host: Host, planned: BackupOutcome) -> BackupOutcome:
        exists = await self._executor.execute(host, commands.test_dir(planned.source_path))
        if not exists.ok:
            self._logger.debug("No %s data at %s - nothing to back up", planned.kind.value, planned.source_path)
            return BackupOutcome(
                kind=planned.kind,
                source_path=planned.source_path,
                backup_path=planned.backup_path,
                status="skipped",
            )

        result = await self._executor.execute(host, commands.copy_tree(planned.source_path, planned.backup_path))
        if not result.ok:
            message = result.error or f"exit status {result.exit_status}"
            self._logger.warning(tr("backup.failed", path=planned.source_path, error=message))
            return BackupOutcome(
                kind=planned.kind,
                source_path=planned.source_path,
                backup_path=planned.backup_path,
                status="failed",
                message=message,
            )

        self._logger.info(tr("backup.created", kind=planned.kind.value, path=planned.backup_path))
        return BackupOutcome(
            kind=planned.kind,
            source_path=planned.source_path,
            backup_path=planned.backup_path,
            status="created",
        )
