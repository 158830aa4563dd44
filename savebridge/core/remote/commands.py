from __future__ import annotations

from pathlib import PurePosixPath
import shlex
from typing import Iterable

# find(1) expands the escapes itself: "<size>\t<path>\n" per match
_SIZE_AND_PATH_FORMAT = shlex.quote("%s\\t%p\\n")


def echo(text: str) -> str:
    return f"echo {shlex.quote(text)}"


def list_dir(path: str) -> str:
    return f"ls -1 {shlex.quote(path)}"


def test_dir(path: str) -> str:
    return f"test -d {shlex.quote(path)}"


def cat_file(path: str) -> str:
    return f"cat {shlex.quote(path)}"


def find_first(path: str, pattern: str) -> str:
    return f"find {shlex.quote(path)} -type f -name {shlex.quote(pattern)} -print -quit"


def find_files(path: str, patterns: Iterable[str]) -> str:
    names = " -o ".join(f"-name {shlex.quote(pattern)}" for pattern in patterns)
    return f"find {shlex.quote(path)} -type f \\( {names} \\) -printf {_SIZE_AND_PATH_FORMAT}"


def make_dirs(*paths: str) -> str:
    return "mkdir -p " + " ".join(shlex.quote(path) for path in paths)


def copy_tree(source: str, target: str) -> str:
    return f"cp -r {shlex.quote(source)} {shlex.quote(target)}"


def normalize_remote_path(remote_path: str) -> str:
    normalized = "/" + "/".join(part for part in remote_path.strip().split("/") if part)
    return str(PurePosixPath(normalized if normalized != "" else "/"))


def join_remote(root: str, *parts: str) -> str:
    return str(PurePosixPath(root).joinpath(*parts))
