from __future__ import annotations

import argparse
import asyncio
import getpass
import logging
from pathlib import Path
from typing import Sequence

from core.config import AppConfig
from core.errors import ExitCode, TransferError
from core.logging import setup_logging
from core.paths import ensure_runtime_directories
from core.profiles.credentials import CredentialService
from core.profiles.models import Profile
from core.profiles.selector import ConsolePrompt, ProfileSelector, SelectionPrompt
from core.remote.client_base import Host
from core.remote.client_factory import create_executor
from core.transfers.orchestrator import TransferOrchestrator
from core.transfers.transfer_models import TransferOptions, TransferResult
from i18n.i18n import initialize_i18n, tr

EPILOG = """\
examples:
  # prompt for a profile when a device has several
  savebridge -s steamdeck -d purpledeck

  # name both profiles, never prompt
  savebridge -s steamdeck -d purpledeck --source-user "uncle_who" --dest-user "lydia" --non-interactive

  # list profiles with save data on both devices
  savebridge -s steamdeck -d purpledeck --list-users

  # show the plan, including backups, without changing anything
  savebridge -s 10.0.0.42 -d 10.0.0.45 --source-user "Bob" --dest-user "Alice" -b --dry-run
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="savebridge",
        description="Transfer game save files between Steam Decks, one Steam profile on each side.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-s", "--source", required=True, metavar="HOST", help="source device hostname or IP")
    parser.add_argument("-d", "--dest", required=True, metavar="HOST", help="destination device hostname or IP")
    parser.add_argument("--source-user", metavar="NAME", help="source Steam profile name")
    parser.add_argument("--dest-user", metavar="NAME", help="destination Steam profile name")
    parser.add_argument("-u", "--ssh-user", metavar="USER", help="SSH username (default from config: deck)")
    parser.add_argument("-p", "--port", type=_port, metavar="PORT", help="SSH port (default from config: 22)")
    parser.add_argument("-n", "--dry-run", action="store_true", help="show what would be transferred without doing it")
    parser.add_argument("-b", "--backup", action="store_true", help="back up existing saves on the destination first")
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose output")
    parser.add_argument("--list-users", action="store_true", help="list Steam profiles on both devices and exit")
    parser.add_argument("--non-interactive", action="store_true", help="fail instead of prompting for a profile")
    parser.add_argument("--ask-password", action="store_true", help="prompt for SSH passwords and remember them")
    parser.add_argument("--config", type=Path, metavar="PATH", help="use an alternate config file")
    return parser


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError as error:
        raise argparse.ArgumentTypeError(f"invalid port: {value}") from error
    if port < 1 or port > 65535:
        raise argparse.ArgumentTypeError(f"port out of range: {value}")
    return port


def resolve_hosts(args: argparse.Namespace, config: AppConfig) -> tuple[Host, Host]:
    username = args.ssh_user or config.get_ssh_user()
    port = args.port or config.get_ssh_port()
    return Host(args.source, username, port), Host(args.dest, username, port)


def options_from_args(args: argparse.Namespace, config: AppConfig) -> TransferOptions:
    return TransferOptions(
        source_profile_name=args.source_user,
        dest_profile_name=args.dest_user,
        dry_run=args.dry_run,
        create_backup=args.backup,
        list_only=args.list_users,
        non_interactive=args.non_interactive,
        missing_dest_profile=config.get_missing_dest_profile_policy(),
    )


def _remember_passwords(hosts: Sequence[Host], credentials: CredentialService) -> None:
    for host in dict.fromkeys(hosts):
        password = getpass.getpass(tr("credentials.prompt", host=host.label))
        if password.strip() == "":
            continue
        credentials.set_password(host.address, host.username, password)


def _print_profiles(title: str, profiles: list[Profile]) -> None:
    print(title)
    if not profiles:
        print(f"  {tr('list.none')}")
    for profile in profiles:
        print(f"  - {profile.describe()}")


def _print_summary(result: TransferResult, logger: logging.Logger) -> None:
    plan = result.plan
    if plan is None:
        return

    if result.dry_run:
        logger.info(tr("summary.dry_run", source=plan.source_profile.name, dest=plan.dest_profile.name))
        return

    print()
    print(tr("summary.from", name=plan.source_profile.name, host=plan.source_host.address))
    print(tr("summary.to", name=plan.dest_profile.name, host=plan.dest_host.address))
    print(tr("summary.copied", copied=result.files_copied, total=len(result.operations)))
    for outcome in result.backups:
        if outcome.created:
            print(tr("summary.backup", path=outcome.backup_path))
    if result.partial_failure:
        print(tr("summary.failed", count=result.files_failed))
        for failure in result.failures:
            print(f"  - {failure.source_path}: {failure.message}")
    print(tr("summary.launch", name=plan.dest_profile.name))


def run(
    args: argparse.Namespace,
    config: AppConfig,
    logger: logging.Logger,
    prompt: SelectionPrompt | None = None,
) -> int:
    source_host, dest_host = resolve_hosts(args, config)
    options = options_from_args(args, config)

    logger.info(tr("startup.source", host=source_host.label))
    logger.info(tr("startup.dest", host=dest_host.label))
    if options.dry_run:
        logger.warning(tr("startup.dry_run"))

    credentials = CredentialService()
    if args.ask_password:
        _remember_passwords([source_host, dest_host], credentials)

    executor = create_executor([source_host, dest_host], config, logger, credential_service=credentials)
    selector = ProfileSelector(
        prompt=prompt or ConsolePrompt(),
        logger=logger.getChild("selection"),
    )
    orchestrator = TransferOrchestrator(
        executor=executor,
        steam_root=config.get_steam_root(),
        game=config.get_game(),
        selector=selector,
        logger=logger.getChild("transfer"),
    )

    try:
        result = asyncio.run(orchestrator.run(source_host, dest_host, options))
    except TransferError as error:
        logger.error(error.message)
        return int(error.exit_code)

    if options.list_only:
        print()
        _print_profiles(tr("list.source", host=source_host.address), result.source_profiles)
        print()
        _print_profiles(tr("list.dest", host=dest_host.address), result.dest_profiles)
        return int(ExitCode.OK)

    _print_summary(result, logger)
    if result.partial_failure:
        return int(ExitCode.PARTIAL_COPY)
    return int(ExitCode.OK)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    ensure_runtime_directories()
    config = AppConfig(args.config)
    initialize_i18n(config.get_language())
    logger = setup_logging(verbose=args.verbose)

    try:
        return run(args, config, logger)
    except KeyboardInterrupt:
        logger.warning(tr("startup.interrupted"))
        return int(ExitCode.INTERRUPTED)


if __name__ == "__main__":
    raise SystemExit(main())
