from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Profile:
    account_id: int
    name: str
    has_cloud_data: bool
    has_compat_data: bool
    name_source: str = "login_record"

    @property
    def data_kinds(self) -> list[str]:
        kinds: list[str] = []
        if self.has_cloud_data:
            kinds.append("Cloud")
        if self.has_compat_data:
            kinds.append("Saves")
        return kinds

    def describe(self) -> str:
        kinds = " ".join(self.data_kinds) or "Unknown"
        return f"{self.name} (ID: {self.account_id}) [{kinds}]"
