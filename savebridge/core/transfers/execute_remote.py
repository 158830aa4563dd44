from __future__ import annotations

import logging

from core.errors import HostUnreachableError
from core.remote import commands
from core.remote.client_base import Host, RemoteExecutor
from core.saves.models import StoragePaths
from core.transfers.transfer_models import CopyFailure, CopyOperation


async def ensure_destination_dirs(
    executor: RemoteExecutor,
    host: Host,
    paths: StoragePaths,
    logger: logging.Logger,
) -> bool:
    result = await executor.execute(host, commands.make_dirs(paths.cloud_path, paths.compat_path))
    if not result.ok:
        logger.warning(
            "Could not create save directories on %s: %s",
            host.label,
            result.error or f"exit status {result.exit_status}",
        )
        return False
    return True


async def copy_operation(
    executor: RemoteExecutor,
    source_host: Host,
    dest_host: Host,
    operation: CopyOperation,
) -> CopyFailure | None:
    try:
        success, message = await executor.copy(source_host, operation.source_path, dest_host, operation.dest_path)
    except HostUnreachableError as error:
        return CopyFailure(source_path=operation.source_path, message=error.message)

    if not success:
        return CopyFailure(source_path=operation.source_path, message=message)
    return None
