from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class Host:
    address: str
    username: str
    port: int = 22

    @property
    def label(self) -> str:
        return f"{self.username}@{self.address}:{self.port}"


@dataclass(slots=True)
class CommandResult:
    output: str
    exit_status: int
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_status == 0

    def lines(self) -> list[str]:
        return [line for line in self.output.splitlines() if line.strip() != ""]


class RemoteExecutor(Protocol):
    async def test_connection(self, host: Host) -> tuple[bool, str]: ...

    async def execute(self, host: Host, command: str) -> CommandResult: ...

    async def copy(
        self,
        source_host: Host,
        source_path: str,
        dest_host: Host,
        dest_path: str,
    ) -> tuple[bool, str]: ...
