from __future__ import annotations

import logging
import re

from core.errors import DiscoveryError
from core.profiles.login_records import LoginRecords, LoginRecordStatus, parse_login_records, resolve_persona_name
from core.profiles.models import Profile
from core.remote import commands
from core.remote.client_base import Host, RemoteExecutor
from core.saves.game import GameDefinition
from core.saves.path_resolver import compat_app_root, login_record_path, resolve_storage_paths, userdata_root
from i18n.i18n import tr

_ACCOUNT_ID_PATTERN = re.compile(r"^[0-9]+$")


class ProfileDiscoveryService:
    def __init__(
        self,
        executor: RemoteExecutor,
        steam_root: str,
        game: GameDefinition,
        logger: logging.Logger | None = None,
    ) -> None:
        self._executor = executor
        self._steam_root = steam_root
        self._game = game
        self._logger = logger or logging.getLogger("savebridge.profiles")

    async def discover(self, host: Host) -> list[Profile]:
        self._logger.info(tr("discovery.start", host=host.label, game=self._game.name))

        account_ids = await self._list_account_ids(host)
        records = await self._load_login_records(host)

        profiles: list[Profile] = []
        for account_id in account_ids:
            has_cloud_data = await self._probe_cloud(host, account_id)
            has_compat_data = await self._probe_compat(host, account_id)

            if not has_cloud_data and not has_compat_data:
                self._logger.debug("Account %s has no %s data - skipped", account_id, self._game.name)
                continue

            name, name_source = resolve_persona_name(records, account_id)
            profile = Profile(
                account_id=account_id,
                name=name,
                has_cloud_data=has_cloud_data,
                has_compat_data=has_compat_data,
                name_source=name_source,
            )
            self._logger.debug(
                "Found profile: %s cloud=%s compat=%s name_source=%s",
                profile.describe(),
                has_cloud_data,
                has_compat_data,
                name_source,
            )
            profiles.append(profile)

        if not profiles:
            self._logger.warning(tr("discovery.none", host=host.label, game=self._game.name))

        self._logger.info("Discovery finished on %s: accounts=%s candidates=%s", host.label, len(account_ids), len(profiles))
        return profiles

    async def _list_account_ids(self, host: Host) -> list[int]:
        userdata = userdata_root(self._steam_root)
        result = await self._executor.execute(host, commands.list_dir(userdata))
        if not result.ok:
            raise DiscoveryError(
                host.label,
                tr("discovery.error.userdata_unlistable", host=host.label, path=userdata, error=result.error or result.exit_status),
            )

        account_ids = {
            int(name.strip())
            for name in result.lines()
            if _ACCOUNT_ID_PATTERN.match(name.strip())
        }
        return sorted(account_ids)

    async def _load_login_records(self, host: Host) -> LoginRecords:
        path = login_record_path(self._steam_root)
        result = await self._executor.execute(host, commands.cat_file(path))
        if not result.ok:
            self._logger.warning(tr("discovery.warning.login_record_missing", host=host.label, path=path))
            return parse_login_records(None)

        records = parse_login_records(result.output)
        if records.status == LoginRecordStatus.UNPARSEABLE:
            self._logger.warning(tr("discovery.warning.login_record_unparseable", host=host.label, path=path))
        return records

    async def _probe_cloud(self, host: Host, account_id: int) -> bool:
        paths = resolve_storage_paths(self._steam_root, account_id, self._game)
        result = await self._executor.execute(host, commands.test_dir(paths.cloud_path))
        return result.ok

    async def _probe_compat(self, host: Host, account_id: int) -> bool:
        app_root = compat_app_root(self._steam_root, self._game)
        root_result = await self._executor.execute(host, commands.test_dir(app_root))
        if not root_result.ok:
            return False

        paths = resolve_storage_paths(self._steam_root, account_id, self._game)
        find_result = await self._executor.execute(
            host,
            commands.find_first(paths.compat_path, self._game.save_pattern),
        )
        return find_result.output.strip() != ""
