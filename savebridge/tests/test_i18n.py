from __future__ import annotations

import json
from pathlib import Path

import pytest

from i18n.i18n import MessageCatalog, normalize_language, tr


def _write(directory: Path, language: str, messages: dict[str, str]) -> None:
    (directory / f"{language}.json").write_text(json.dumps(messages), encoding="utf-8")


@pytest.mark.parametrize(
    ("code", "expected"),
    [("de_DE.UTF-8", "de"), ("pt-BR", "pt"), ("EN", "en"), ("", "en"), (None, "en")],
)
def test_locale_codes_reduce_to_language(code: str | None, expected: str) -> None:
    assert normalize_language(code) == expected


def test_selected_language_is_layered_over_english(tmp_path: Path) -> None:
    _write(tmp_path, "en", {"greet": "Hello {name}", "bye": "Bye"})
    _write(tmp_path, "de", {"greet": "Hallo {name}"})
    catalog = MessageCatalog(tmp_path)

    catalog.use("de_DE.UTF-8")

    assert catalog.language == "de"
    assert catalog.message("greet", name="Lydia") == "Hallo Lydia"
    assert catalog.message("bye") == "Bye"


def test_unknown_language_and_missing_key(tmp_path: Path) -> None:
    _write(tmp_path, "en", {"greet": "Hello {name}"})
    catalog = MessageCatalog(tmp_path)

    catalog.use("fr")

    assert catalog.language == "en"
    assert catalog.message("nope") == "nope"
    assert catalog.message("greet") == "Hello {name}"


def test_shipped_catalog_formats_messages() -> None:
    assert tr("summary.copied", copied=2, total=3) == "Copied 2 of 3 files"
