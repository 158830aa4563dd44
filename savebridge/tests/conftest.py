from __future__ import annotations

import fnmatch
from pathlib import PurePosixPath
import shlex
from typing import Callable, Sequence

import pytest

from core.errors import HostUnreachableError
from core.profiles.login_records import STEAMID64_BASE
from core.remote.client_base import CommandResult, Host
from core.saves.game import SLIME_RANCHER

STEAM_ROOT = "/home/deck/.local/share/Steam"
USERDATA = f"{STEAM_ROOT}/userdata"
COMPAT_SAVES = f"{STEAM_ROOT}/steamapps/compatdata/433340/{SLIME_RANCHER.compat_save_subpath}"


class FakeHost:
    """In-memory file tree standing in for a remote device."""

    def __init__(self, files: dict[str, bytes] | None = None, dirs: Sequence[str] = ()) -> None:
        self.files: dict[str, bytes] = dict(files or {})
        self.dirs: set[str] = set(dirs)

    def is_dir(self, path: str) -> bool:
        path = path.rstrip("/")
        if path in self.dirs:
            return True
        prefix = path + "/"
        return any(item.startswith(prefix) for item in [*self.files, *self.dirs])

    def files_under(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        return [item for item in self.files if item.startswith(prefix)]

    def children(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        names = set()
        for item in [*self.files, *self.dirs]:
            if item.startswith(prefix):
                names.add(item[len(prefix) :].split("/", 1)[0])
        return sorted(names)

    def snapshot(self) -> tuple[dict[str, bytes], frozenset[str]]:
        return dict(self.files), frozenset(self.dirs)


class FakeExecutor:
    def __init__(self, hosts: dict[str, FakeHost]) -> None:
        self.hosts = hosts
        self.unreachable: set[str] = set()
        self.failing_copies: set[str] = set()
        self.failing_verbs: set[tuple[str, str]] = set()
        self.commands: list[tuple[str, str]] = []
        self.copies: list[tuple[str, str, str, str]] = []

    async def test_connection(self, host: Host) -> tuple[bool, str]:
        if host.address in self.unreachable or host.address not in self.hosts:
            return False, "Connection timed out"
        return True, "ok"

    async def execute(self, host: Host, command: str) -> CommandResult:
        if host.address in self.unreachable:
            raise HostUnreachableError(host.label, "Connection timed out")

        self.commands.append((host.address, command))
        fake = self.hosts[host.address]
        argv = shlex.split(command)
        verb = argv[0]

        if (host.address, verb) in self.failing_verbs:
            return CommandResult(output="", exit_status=1, error=f"{verb}: Permission denied")

        handler = getattr(self, f"_run_{verb}")
        return handler(fake, argv[1:])

    async def copy(self, source_host: Host, source_path: str, dest_host: Host, dest_path: str) -> tuple[bool, str]:
        self.copies.append((source_host.address, source_path, dest_host.address, dest_path))
        if source_path in self.failing_copies:
            return False, "Connection reset by peer"

        source = self.hosts[source_host.address]
        if source_path not in source.files:
            return False, "No such file"

        self.hosts[dest_host.address].files[dest_path] = source.files[source_path]
        return True, "ok"

    def mutating_commands(self, address: str) -> list[str]:
        return [
            command
            for host_address, command in self.commands
            if host_address == address and command.split(" ", 1)[0] in {"mkdir", "cp"}
        ]

    def _run_echo(self, fake: FakeHost, args: list[str]) -> CommandResult:
        return CommandResult(output=" ".join(args) + "\n", exit_status=0)

    def _run_ls(self, fake: FakeHost, args: list[str]) -> CommandResult:
        path = args[-1]
        if not fake.is_dir(path):
            return CommandResult(output="", exit_status=2, error=f"ls: cannot access '{path}': No such file or directory")
        return CommandResult(output="".join(f"{name}\n" for name in fake.children(path)), exit_status=0)

    def _run_test(self, fake: FakeHost, args: list[str]) -> CommandResult:
        return CommandResult(output="", exit_status=0 if fake.is_dir(args[-1]) else 1)

    def _run_cat(self, fake: FakeHost, args: list[str]) -> CommandResult:
        path = args[-1]
        if path not in fake.files:
            return CommandResult(output="", exit_status=1, error=f"cat: {path}: No such file or directory")
        return CommandResult(output=fake.files[path].decode("utf-8"), exit_status=0)

    def _run_find(self, fake: FakeHost, args: list[str]) -> CommandResult:
        root = args[0]
        if not fake.is_dir(root):
            return CommandResult(output="", exit_status=1, error=f"find: '{root}': No such file or directory")

        patterns = [args[index + 1] for index, arg in enumerate(args) if arg == "-name"]
        matches = [
            path
            for path in fake.files_under(root)
            if any(fnmatch.fnmatchcase(PurePosixPath(path).name, pattern) for pattern in patterns)
        ]
        # find(1) gives no ordering guarantee
        matches.sort(reverse=True)

        if "-quit" in args:
            return CommandResult(output=f"{matches[0]}\n" if matches else "", exit_status=0)
        return CommandResult(
            output="".join(f"{len(fake.files[path])}\t{path}\n" for path in matches),
            exit_status=0,
        )

    def _run_mkdir(self, fake: FakeHost, args: list[str]) -> CommandResult:
        fake.dirs.update(arg.rstrip("/") for arg in args if arg != "-p")
        return CommandResult(output="", exit_status=0)

    def _run_cp(self, fake: FakeHost, args: list[str]) -> CommandResult:
        source, target = args[-2], args[-1]
        if not fake.is_dir(source):
            return CommandResult(output="", exit_status=1, error=f"cp: cannot stat '{source}'")
        for path in fake.files_under(source):
            fake.files[target + path[len(source) :]] = fake.files[path]
        fake.dirs.add(target)
        return CommandResult(output="", exit_status=0)


class ScriptedPrompt:
    def __init__(self, *answers: str) -> None:
        self._answers = list(answers)
        self.calls: list[tuple[str, list[str]]] = []

    def ask(self, title: str, options: Sequence[str]) -> str:
        self.calls.append((title, list(options)))
        if not self._answers:
            raise AssertionError("prompt was not expected")
        return self._answers.pop(0)


def login_vdf(names: dict[int, str]) -> str:
    blocks = []
    for account_id, name in names.items():
        blocks.append(
            f'\t"{account_id + STEAMID64_BASE}"\n'
            "\t{\n"
            f'\t\t"AccountName"\t\t"acc_{account_id}"\n'
            f'\t\t"PersonaName"\t\t"{name}"\n'
            '\t\t"RememberPassword"\t\t"1"\n'
            '\t\t"MostRecent"\t\t"0"\n'
            "\t}\n"
        )
    return '"users"\n{\n' + "".join(blocks) + "}\n"


def build_deck(
    names: dict[int, str],
    cloud_files: dict[int, list[str]] | None = None,
    compat_files: Sequence[str] = (),
    extra_users: Sequence[int] = (),
    login_record: str | None = None,
) -> FakeHost:
    """Builds a device; file names are relative to the cloud or compat root."""
    files: dict[str, bytes] = {}
    dirs = {f"{USERDATA}/{account_id}" for account_id in [*names, *extra_users]}

    for account_id, relative_paths in (cloud_files or {}).items():
        cloud_root = f"{USERDATA}/{account_id}/433340"
        dirs.add(cloud_root)
        for relative_path in relative_paths:
            files[f"{cloud_root}/{relative_path}"] = f"cloud:{account_id}:{relative_path}".encode()

    for relative_path in compat_files:
        files[f"{COMPAT_SAVES}/{relative_path}"] = f"compat:{relative_path}".encode()

    record = login_record if login_record is not None else login_vdf(names)
    files[f"{STEAM_ROOT}/config/loginusers.vdf"] = record.encode("utf-8")
    return FakeHost(files=files, dirs=sorted(dirs))


@pytest.fixture
def deck_factory() -> Callable[..., FakeHost]:
    return build_deck


@pytest.fixture
def executor_factory() -> Callable[[dict[str, FakeHost]], FakeExecutor]:
    return FakeExecutor


@pytest.fixture
def prompt_factory() -> Callable[..., ScriptedPrompt]:
    return ScriptedPrompt


@pytest.fixture
def vdf_factory() -> Callable[[dict[int, str]], str]:
    return login_vdf


@pytest.fixture
def steam_root() -> str:
    return STEAM_ROOT
