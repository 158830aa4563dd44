from __future__ import annotations

import logging
from typing import Protocol, Sequence

from core.errors import AmbiguousSelectionError, InvalidSelectionError, ProfileNotFoundError
from core.profiles.models import Profile
from i18n.i18n import tr


class SelectionPrompt(Protocol):
    def ask(self, title: str, options: Sequence[str]) -> str:
        """Show 1-based options and return the operator's raw answer."""
        ...


class ConsolePrompt:
    def ask(self, title: str, options: Sequence[str]) -> str:
        print(title)
        print()
        for number, option in enumerate(options, start=1):
            print(f"  {number}. {option}")
        print()
        try:
            return input(tr("selection.prompt", count=len(options)) + " ")
        except EOFError:
            return ""


class ProfileSelector:
    FAIL = "fail"
    USE_SINGLE = "use_single"

    def __init__(
        self,
        prompt: SelectionPrompt | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._prompt = prompt or ConsolePrompt()
        self._logger = logger or logging.getLogger("savebridge.selection")

    def select(
        self,
        profiles: Sequence[Profile],
        description: str,
        target_name: str | None = None,
        missing_policy: str = FAIL,
        non_interactive: bool = False,
    ) -> Profile:
        if target_name:
            return self._select_by_name(profiles, description, target_name, missing_policy)
        return self._select_by_count(profiles, description, non_interactive)

    def _select_by_name(
        self,
        profiles: Sequence[Profile],
        description: str,
        target_name: str,
        missing_policy: str,
    ) -> Profile:
        matches = [profile for profile in profiles if profile.name == target_name]
        if len(matches) > 1:
            raise AmbiguousSelectionError(
                tr(
                    "selection.error.duplicate_name",
                    name=target_name,
                    description=description,
                    count=len(matches),
                    profiles=", ".join(profile.describe() for profile in matches),
                )
            )
        if matches:
            profile = matches[0]
            self._logger.info(tr("selection.selected", description=description, profile=profile.describe()))
            return profile

        if missing_policy == self.USE_SINGLE and len(profiles) == 1:
            profile = profiles[0]
            self._logger.warning(
                tr("selection.warning.using_single", description=description, name=target_name, profile=profile.describe())
            )
            return profile

        raise ProfileNotFoundError(tr("selection.error.name_not_found", name=target_name, description=description))

    def _select_by_count(self, profiles: Sequence[Profile], description: str, non_interactive: bool) -> Profile:
        if not profiles:
            raise ProfileNotFoundError(tr("selection.error.no_candidates", description=description))

        if len(profiles) == 1:
            profile = profiles[0]
            self._logger.info(tr("selection.single", description=description, profile=profile.describe()))
            return profile

        if non_interactive:
            raise AmbiguousSelectionError(
                tr("selection.error.ambiguous", description=description, count=len(profiles))
            )

        answer = self._prompt.ask(
            tr("selection.title", description=description),
            [profile.describe() for profile in profiles],
        )
        index = _parse_choice(answer, len(profiles))
        if index is None:
            raise InvalidSelectionError(tr("selection.error.invalid", answer=answer.strip()))

        profile = profiles[index]
        self._logger.info(tr("selection.selected", description=description, profile=profile.describe()))
        return profile


def _parse_choice(answer: str, count: int) -> int | None:
    value = answer.strip()
    if not value.isascii() or not value.isdigit():
        return None
    number = int(value)
    if number < 1 or number > count:
        return None
    return number - 1
