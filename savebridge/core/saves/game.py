from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True, slots=True)
class GameDefinition:
    name: str
    app_id: str
    compat_save_subpath: str
    save_pattern: str
    extensions: tuple[str, ...]

    def name_patterns(self) -> tuple[str, ...]:
        return tuple(f"*{extension}" for extension in self.extensions)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any], base: GameDefinition) -> GameDefinition:
        app_id = str(raw.get("app_id", base.app_id)).strip()
        if not app_id.isdigit():
            app_id = base.app_id

        subpath = str(raw.get("compat_save_subpath", base.compat_save_subpath)).strip().strip("/")
        if subpath == "":
            subpath = base.compat_save_subpath

        save_pattern = str(raw.get("save_pattern", base.save_pattern)).strip() or base.save_pattern

        extensions = base.extensions
        raw_extensions = raw.get("extensions")
        if isinstance(raw_extensions, list):
            cleaned = tuple(
                value if value.startswith(".") else f".{value}"
                for value in (str(item).strip() for item in raw_extensions)
                if value not in {"", "."}
            )
            if cleaned:
                extensions = cleaned

        return cls(
            name=str(raw.get("name", base.name)).strip() or base.name,
            app_id=app_id,
            compat_save_subpath=subpath,
            save_pattern=save_pattern,
            extensions=extensions,
        )


SLIME_RANCHER = GameDefinition(
    name="Slime Rancher",
    app_id="433340",
    compat_save_subpath="pfx/drive_c/users/steamuser/AppData/LocalLow/Monomi Park/Slime Rancher",
    save_pattern="*.sav",
    extensions=(".sav", ".cfg", ".prf"),
)
