from __future__ import annotations

import logging

from core.config import AppConfig
from core.profiles.credentials import CredentialService
from core.remote.client_base import Host, RemoteExecutor
from core.remote.ssh_client import SSHExecutor


def create_executor(
    hosts: list[Host],
    config: AppConfig,
    logger: logging.Logger,
    credential_service: CredentialService | None = None,
) -> RemoteExecutor:
    credentials = credential_service or CredentialService()

    passwords: dict[Host, str] = {}
    for host in hosts:
        password = credentials.get_password(host.address, host.username)
        if password is not None and password.strip() != "":
            passwords[host] = password
            logger.debug("Using stored password for %s", host.label)

    return SSHExecutor(
        passwords=passwords,
        timeout_seconds=config.get_connect_timeout(),
        verify_host_key=config.get_verify_host_key(),
        logger=logger.getChild("remote"),
    )
