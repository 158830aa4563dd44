from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    OK = 0
    ERROR = 1
    USAGE = 2
    UNREACHABLE = 3
    NOT_FOUND = 4
    AMBIGUOUS = 5
    VERIFICATION_FAILED = 6
    PARTIAL_COPY = 7
    INTERRUPTED = 130


class TransferError(Exception):
    """Fatal failure that ends a run at the state it occurred in."""

    exit_code = ExitCode.ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.state: str | None = None


class HostUnreachableError(TransferError):
    exit_code = ExitCode.UNREACHABLE

    def __init__(self, host_label: str, message: str) -> None:
        super().__init__(message)
        self.host_label = host_label


class DiscoveryError(HostUnreachableError):
    pass


class NotFoundError(TransferError):
    exit_code = ExitCode.NOT_FOUND


class ProfileNotFoundError(NotFoundError):
    pass


class NoSourceFilesError(NotFoundError):
    pass


class AmbiguousError(TransferError):
    exit_code = ExitCode.AMBIGUOUS


class AmbiguousSelectionError(AmbiguousError):
    pass


class InvalidSelectionError(AmbiguousError):
    pass


class VerificationFailedError(TransferError):
    exit_code = ExitCode.VERIFICATION_FAILED
