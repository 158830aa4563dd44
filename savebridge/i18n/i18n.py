from __future__ import annotations

import json
import logging
from pathlib import Path

from core.resources import get_translations_dir

BASE_LANGUAGE = "en"

_logger = logging.getLogger("savebridge.i18n")


def normalize_language(code: str | None) -> str:
    """Reduce locale strings such as ``de_DE.UTF-8`` or ``pt-BR`` to ``de`` / ``pt``."""
    if not code:
        return BASE_LANGUAGE
    value = code.strip().split(".", 1)[0].replace("-", "_")
    language = value.split("_", 1)[0].lower()
    return language or BASE_LANGUAGE


class MessageCatalog:
    """Operator messages keyed by id; the selected language is layered over English."""

    def __init__(self, translations_dir: Path | None = None) -> None:
        self._translations_dir = translations_dir
        self._language = BASE_LANGUAGE
        self._messages: dict[str, str] | None = None

    @property
    def language(self) -> str:
        return self._language

    def available_languages(self) -> list[str]:
        directory = self._directory()
        if not directory.exists():
            return []
        return sorted(path.stem for path in directory.glob("*.json"))

    def use(self, language: str | None) -> None:
        requested = normalize_language(language)
        if requested not in self.available_languages():
            _logger.debug("No translations for '%s'; using %s", requested, BASE_LANGUAGE)
            requested = BASE_LANGUAGE

        messages = self._read(BASE_LANGUAGE)
        if requested != BASE_LANGUAGE:
            messages.update(self._read(requested))

        self._language = requested
        self._messages = messages

    def message(self, key: str, **kwargs: object) -> str:
        if self._messages is None:
            self.use(self._language)

        template = self._messages.get(key)
        if template is None:
            _logger.debug("Missing message key: %s", key)
            return key

        try:
            return template.format(**kwargs)
        except (KeyError, ValueError, IndexError):
            return template

    def _directory(self) -> Path:
        return self._translations_dir or get_translations_dir()

    def _read(self, language: str) -> dict[str, str]:
        path = self._directory() / f"{language}.json"
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as error:
            _logger.warning("Cannot read translations %s: %s", path, error)
            return {}
        if not isinstance(payload, dict):
            return {}
        return {str(key): str(value) for key, value in payload.items()}


_catalog = MessageCatalog()


def initialize_i18n(language: str | None) -> None:
    _catalog.use(language)


def tr(key: str, **kwargs: object) -> str:
    return _catalog.message(key, **kwargs)
