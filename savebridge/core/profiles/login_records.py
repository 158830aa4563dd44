"""Tolerant reader for Steam's ``loginusers.vdf`` (Valve KeyValues text).

The file maps SteamID64 keys to blocks of string fields::

    "users"
    {
        "76561198000000001"
        {
            "AccountName"   "alice_acc"
            "PersonaName"   "Alice"
        }
    }

Decoding never raises. Structural damage (truncation, stray braces) marks the
result ``UNPARSEABLE`` but keeps whatever was read before the damage, so a
usable name may still be found for early records.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import logging
from typing import Union

STEAMID64_BASE = 76561197960265728

_logger = logging.getLogger("savebridge.profiles.login_records")

KeyValues = dict[str, Union[str, "KeyValues"]]


class LoginRecordStatus(str, Enum):
    PARSED = "parsed"
    EMPTY = "empty"
    UNPARSEABLE = "unparseable"


@dataclass(slots=True)
class LoginRecords:
    status: LoginRecordStatus
    tree: KeyValues = field(default_factory=dict)

    def users(self) -> KeyValues:
        for key, value in self.tree.items():
            if key.lower() == "users" and isinstance(value, dict):
                return value
        return self.tree

    def persona_name(self, account_id: int) -> str | None:
        candidates = {str(account_id), str(account_id + STEAMID64_BASE)}
        for key, record in self.users().items():
            if key not in candidates or not isinstance(record, dict):
                continue
            for field_name, value in record.items():
                if field_name.lower() == "personaname" and isinstance(value, str):
                    name = value.strip()
                    if name:
                        return name
        return None


def resolve_persona_name(records: LoginRecords, account_id: int) -> tuple[str, str]:
    name = records.persona_name(account_id)
    if name:
        return name, "login_record"
    return fallback_name(account_id), "fallback"


def fallback_name(account_id: int) -> str:
    return f"User_{account_id}"


def parse_login_records(text: str | None) -> LoginRecords:
    if text is None or text.strip() == "":
        return LoginRecords(status=LoginRecordStatus.EMPTY)

    tokens = _tokenize(text)
    if not tokens:
        return LoginRecords(status=LoginRecordStatus.EMPTY)

    parser = _Parser(tokens)
    tree = parser.parse()
    if parser.damaged:
        _logger.debug("Login record is malformed; keeping %s top-level keys", len(tree))
        return LoginRecords(status=LoginRecordStatus.UNPARSEABLE, tree=tree)
    return LoginRecords(status=LoginRecordStatus.PARSED, tree=tree)


# (kind, value): kind is "str", "open" or "close"
_Token = tuple[str, str]

_ESCAPES = {"n": "\n", "t": "\t", "\\": "\\", '"': '"'}


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    index = 0
    length = len(text)

    while index < length:
        char = text[index]

        if char.isspace():
            index += 1
            continue

        if text.startswith("//", index):
            newline = text.find("\n", index)
            index = length if newline == -1 else newline + 1
            continue

        if char == "{":
            tokens.append(("open", char))
            index += 1
            continue

        if char == "}":
            tokens.append(("close", char))
            index += 1
            continue

        if char == '"':
            index += 1
            chars: list[str] = []
            while index < length and text[index] != '"':
                if text[index] == "\\" and index + 1 < length:
                    chars.append(_ESCAPES.get(text[index + 1], text[index + 1]))
                    index += 2
                    continue
                chars.append(text[index])
                index += 1
            # unterminated quotes swallow the rest of the input
            tokens.append(("str", "".join(chars)))
            index += 1
            continue

        start = index
        while index < length and not text[index].isspace() and text[index] not in '{}"':
            index += 1
        word = text[start:index]
        if word.startswith("[") and word.endswith("]"):
            # platform conditional such as [$WIN32]
            continue
        tokens.append(("str", word))

    return tokens


class _Parser:
    def __init__(self, tokens: list[_Token]) -> None:
        self._tokens = tokens
        self.damaged = False

    def parse(self) -> KeyValues:
        tree: KeyValues = {}
        # innermost open block last; unkeyed blocks are read but never attached
        stack: list[KeyValues] = [tree]
        tokens = self._tokens
        position = 0

        while position < len(tokens):
            kind, value = tokens[position]
            position += 1

            if kind == "close":
                if len(stack) == 1:
                    self.damaged = True
                    continue
                stack.pop()
                continue

            if kind == "open":
                self.damaged = True
                stack.append({})
                continue

            if position >= len(tokens):
                self.damaged = True
                break

            next_kind, next_value = tokens[position]
            position += 1

            if next_kind == "open":
                child: KeyValues = {}
                stack[-1][value] = child
                stack.append(child)
            elif next_kind == "str":
                stack[-1][value] = next_value
            else:
                # dangling key closed by its parent
                self.damaged = True
                if len(stack) > 1:
                    stack.pop()

        if len(stack) > 1:
            self.damaged = True
        return tree
