from __future__ import annotations

import shlex

from core.remote import commands


def test_paths_with_spaces_are_quoted() -> None:
    path = "/home/deck/Monomi Park/Slime Rancher"

    assert shlex.split(commands.test_dir(path)) == ["test", "-d", path]
    assert shlex.split(commands.make_dirs(path, "/tmp/b")) == ["mkdir", "-p", path, "/tmp/b"]
    assert shlex.split(commands.copy_tree(path, path + ".backup.1")) == ["cp", "-r", path, path + ".backup.1"]


def test_find_files_matches_any_pattern_and_prints_size() -> None:
    argv = shlex.split(commands.find_files("/saves", ["*.sav", "*.cfg"]))

    assert argv[:4] == ["find", "/saves", "-type", "f"]
    assert argv[4:11] == ["(", "-name", "*.sav", "-o", "-name", "*.cfg", ")"]
    assert argv[-2:] == ["-printf", "%s\\t%p\\n"]


def test_find_first_stops_after_one_match() -> None:
    argv = shlex.split(commands.find_first("/saves", "*.sav"))

    assert argv[-2:] == ["-print", "-quit"]


def test_remote_path_helpers() -> None:
    assert commands.normalize_remote_path(" //home//deck/ ") == "/home/deck"
    assert commands.normalize_remote_path("") == "/"
    assert commands.join_remote("/a/b", "remote", "x.sav") == "/a/b/remote/x.sav"
