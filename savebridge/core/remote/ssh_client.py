from __future__ import annotations

import asyncio
import logging
from pathlib import Path, PurePosixPath
import tempfile

import asyncssh

from core.errors import HostUnreachableError
from core.remote import commands
from core.remote.client_base import CommandResult, Host

_CONNECTION_ERRORS = (OSError, asyncssh.Error, asyncio.TimeoutError)


class SSHExecutor:
    def __init__(
        self,
        passwords: dict[Host, str] | None = None,
        timeout_seconds: float = 10.0,
        verify_host_key: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self._passwords = dict(passwords or {})
        self._timeout_seconds = timeout_seconds
        self._verify_host_key = verify_host_key
        self._logger = logger or logging.getLogger("savebridge.remote")

    async def test_connection(self, host: Host) -> tuple[bool, str]:
        try:
            result = await self.execute(host, commands.echo("Connection successful"))
        except HostUnreachableError as error:
            return False, error.message

        if not result.ok:
            return False, result.error or f"exit status {result.exit_status}"
        return True, "ok"

    async def execute(self, host: Host, command: str) -> CommandResult:
        self._logger.debug("[%s] $ %s", host.label, command)
        try:
            async with self._open_connection(host) as connection:
                completed = await asyncio.wait_for(
                    connection.run(command, check=False),
                    timeout=self._timeout_seconds,
                )
        except _CONNECTION_ERRORS as error:
            raise HostUnreachableError(host.label, _describe(error)) from error

        exit_status = completed.exit_status if completed.exit_status is not None else -1
        return CommandResult(
            output=_as_text(completed.stdout),
            exit_status=exit_status,
            error=_as_text(completed.stderr).strip(),
        )

    async def copy(
        self,
        source_host: Host,
        source_path: str,
        dest_host: Host,
        dest_path: str,
    ) -> tuple[bool, str]:
        source = commands.normalize_remote_path(source_path)
        target = commands.normalize_remote_path(dest_path)
        parent = str(PurePosixPath(target).parent)

        with tempfile.TemporaryDirectory(prefix="savebridge-") as staging_dir:
            local_path = Path(staging_dir) / PurePosixPath(source).name
            try:
                async with self._open_connection(source_host) as connection:
                    async with connection.start_sftp_client() as sftp:
                        await asyncio.wait_for(sftp.get(source, str(local_path)), timeout=self._timeout_seconds)
            except (*_CONNECTION_ERRORS, asyncssh.SFTPError) as error:
                return False, f"download from {source_host.label} failed: {_describe(error)}"

            try:
                async with self._open_connection(dest_host) as connection:
                    async with connection.start_sftp_client() as sftp:
                        await asyncio.wait_for(sftp.makedirs(parent, exist_ok=True), timeout=self._timeout_seconds)
                        await asyncio.wait_for(sftp.put(str(local_path), target), timeout=self._timeout_seconds)
            except (*_CONNECTION_ERRORS, asyncssh.SFTPError) as error:
                return False, f"upload to {dest_host.label} failed: {_describe(error)}"

        return True, "ok"

    def _open_connection(self, host: Host):
        known_hosts = None if not self._verify_host_key else ()
        return asyncssh.connect(
            host=host.address,
            port=host.port,
            username=host.username,
            password=self._passwords.get(host),
            known_hosts=known_hosts,
            connect_timeout=self._timeout_seconds,
            login_timeout=self._timeout_seconds,
        )


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _describe(error: BaseException) -> str:
    message = str(error).strip()
    if message == "":
        return type(error).__name__
    return message
