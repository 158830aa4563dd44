from __future__ import annotations

import logging

from core.backups.backup_service import BackupService
from core.errors import HostUnreachableError, NoSourceFilesError, TransferError, VerificationFailedError
from core.profiles.discovery_service import ProfileDiscoveryService
from core.profiles.selector import ProfileSelector
from core.remote.client_base import Host, RemoteExecutor
from core.saves.enumerator import FileEnumeratorService
from core.saves.game import GameDefinition
from core.saves.models import StorageKind
from core.saves.path_resolver import resolve_storage_paths
from core.transfers.execute_remote import copy_operation, ensure_destination_dirs
from core.transfers.transfer_models import TransferOptions, TransferPlan, TransferResult, TransferState
from core.transfers.transfer_service import build_plan, plan_copy_operations
from i18n.i18n import tr


class TransferOrchestrator:
    """Runs one migration from a source profile to a destination profile.

    States advance strictly in order:

        INIT -> CONNECTIVITY_CHECK -> DISCOVER_SOURCE -> DISCOVER_DEST
             -> SELECT_SOURCE -> SELECT_DEST -> ENUMERATE_SOURCE
             -> [BACKUP_DEST] -> PREPARE_DEST -> COPY -> VERIFY -> DONE

    Any ``TransferError`` stops the run; its ``state`` names the step that
    failed. Per-file copy failures are collected in the result instead.
    In dry-run mode everything after ENUMERATE_SOURCE is reported, not executed.
    """

    def __init__(
        self,
        executor: RemoteExecutor,
        steam_root: str,
        game: GameDefinition,
        selector: ProfileSelector,
        logger: logging.Logger | None = None,
        backup_service: BackupService | None = None,
    ) -> None:
        self._executor = executor
        self._steam_root = steam_root
        self._game = game
        self._selector = selector
        self._logger = logger or logging.getLogger("savebridge.transfers")
        self._discovery = ProfileDiscoveryService(
            executor, steam_root, game, logger=self._logger.getChild("discovery")
        )
        self._enumerator = FileEnumeratorService(executor, game, logger=self._logger.getChild("enumerate"))
        self._backups = backup_service or BackupService(executor, logger=self._logger.getChild("backup"))
        self._state = TransferState.INIT

    @property
    def state(self) -> TransferState:
        return self._state

    async def run(self, source_host: Host, dest_host: Host, options: TransferOptions) -> TransferResult:
        self._state = TransferState.INIT
        try:
            return await self._run(source_host, dest_host, options)
        except TransferError as error:
            if error.state is None:
                error.state = self._state.value
            self._logger.debug("Run stopped in state %s: %s", self._state.value, error.message)
            raise

    async def _run(self, source_host: Host, dest_host: Host, options: TransferOptions) -> TransferResult:
        result = TransferResult(state=self._state, dry_run=options.dry_run)

        self._enter(TransferState.CONNECTIVITY_CHECK)
        await self._check_connectivity(source_host, tr("host.source"))
        await self._check_connectivity(dest_host, tr("host.dest"))

        self._enter(TransferState.DISCOVER_SOURCE)
        result.source_profiles = await self._discovery.discover(source_host)

        self._enter(TransferState.DISCOVER_DEST)
        result.dest_profiles = await self._discovery.discover(dest_host)

        if options.list_only:
            self._enter(TransferState.DONE)
            result.state = self._state
            return result

        self._enter(TransferState.SELECT_SOURCE)
        source_profile = self._selector.select(
            result.source_profiles,
            tr("host.source_on", host=source_host.address),
            target_name=options.source_profile_name,
            non_interactive=options.non_interactive,
        )

        self._enter(TransferState.SELECT_DEST)
        dest_profile = self._selector.select(
            result.dest_profiles,
            tr("host.dest_on", host=dest_host.address),
            target_name=options.dest_profile_name,
            missing_policy=options.missing_dest_profile,
            non_interactive=options.non_interactive,
        )

        self._enter(TransferState.ENUMERATE_SOURCE)
        source_paths = resolve_storage_paths(self._steam_root, source_profile.account_id, self._game)
        dest_paths = resolve_storage_paths(self._steam_root, dest_profile.account_id, self._game)
        manifest = await self._enumerator.enumerate(source_host, source_paths)
        if manifest.is_empty:
            raise NoSourceFilesError(tr("transfer.error.no_source_files", name=source_profile.name, host=source_host.address))

        plan = build_plan(source_host, source_profile, source_paths, dest_host, dest_profile, dest_paths, manifest)
        result.plan = plan
        result.operations = plan_copy_operations(plan)

        for operation in result.operations:
            self._logger.debug(
                "  - %s (%s, %s bytes)",
                operation.source_path,
                operation.kind.value,
                operation.size_bytes if operation.size_bytes is not None else "?",
            )

        if options.dry_run:
            self._report_dry_run(result, plan, options)
            self._enter(TransferState.DONE)
            result.state = self._state
            return result

        if options.create_backup:
            self._enter(TransferState.BACKUP_DEST)
            result.backups = await self._backups.create_backups(dest_host, dest_paths)

        self._enter(TransferState.PREPARE_DEST)
        await ensure_destination_dirs(self._executor, dest_host, dest_paths, self._logger)

        self._enter(TransferState.COPY)
        await self._copy(plan, result)

        self._enter(TransferState.VERIFY)
        await self._verify(plan, result)

        self._enter(TransferState.DONE)
        result.state = self._state
        return result

    def _enter(self, state: TransferState) -> None:
        self._logger.debug("State: %s -> %s", self._state.value, state.value)
        self._state = state

    async def _check_connectivity(self, host: Host, description: str) -> None:
        self._logger.info(tr("connect.testing", description=description, host=host.label))
        success, message = await self._executor.test_connection(host)
        if not success:
            raise HostUnreachableError(
                host.label,
                tr("connect.failed", description=description, host=host.label, error=message),
            )
        self._logger.info(tr("connect.ok", description=description))

    async def _copy(self, plan: TransferPlan, result: TransferResult) -> None:
        self._logger.info(
            tr(
                "transfer.copying",
                count=len(result.operations),
                source=plan.source_profile.name,
                dest=plan.dest_profile.name,
            )
        )

        for operation in result.operations:
            self._logger.debug("Transferring %s -> %s", operation.source_path, operation.dest_path)
            failure = await copy_operation(self._executor, plan.source_host, plan.dest_host, operation)
            if failure is not None:
                self._logger.error(tr("transfer.file_failed", path=failure.source_path, error=failure.message))
                result.failures.append(failure)
                continue
            result.files_copied += 1

        if result.partial_failure:
            self._logger.warning(
                tr("transfer.partial", failed=result.files_failed, total=len(result.operations))
            )
        else:
            self._logger.info(tr("transfer.completed", count=result.files_copied))

    async def _verify(self, plan: TransferPlan, result: TransferResult) -> None:
        self._logger.info(tr("verify.start"))
        dest_manifest = await self._enumerator.enumerate(plan.dest_host, plan.dest_paths)
        if dest_manifest.is_empty:
            raise VerificationFailedError(tr("verify.failed", name=plan.dest_profile.name, host=plan.dest_host.address))
        result.verified_files = dest_manifest.count
        self._logger.info(tr("verify.ok", count=dest_manifest.count))

    def _report_dry_run(self, result: TransferResult, plan: TransferPlan, options: TransferOptions) -> None:
        if options.create_backup:
            result.backups = self._backups.plan(plan.dest_paths)
            self._logger.info(tr("dryrun.backups"))
            for outcome in result.backups:
                self._logger.info("  %s: %s", outcome.kind.value, outcome.backup_path)

        self._logger.info(tr("dryrun.create_dirs"))
        for kind, path in plan.dest_paths.items():
            self._logger.info("  %s: %s", kind.value, path)

        manifest = plan.manifest
        self._logger.info(
            tr(
                "dryrun.transfer",
                count=manifest.count,
                cloud=len(manifest.by_kind(StorageKind.CLOUD)),
                compat=len(manifest.by_kind(StorageKind.COMPAT)),
            )
        )
        for operation in result.operations:
            self._logger.info("  - %s -> %s (%s)", operation.source_path, operation.dest_path, operation.kind.value)
