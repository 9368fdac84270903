"""Mutation orchestration exceptions: state-machine misuse and bad patches."""

from .base import LuaguardError


class MutationError(LuaguardError):
    """Base class for errors raised by the mutation orchestrator."""

    pass


class MutationInProgressError(MutationError):
    """Raised when a second write begins before the first one finished."""

    def __init__(self, file_path: str, state: str):
        super().__init__(
            f"A mutation is already in flight for {file_path}",
            details={"file_path": file_path, "state": state},
        )
        self.file_path = file_path
        self.state = state


class NoPendingMutationError(MutationError):
    """Raised when proposed content arrives without a preceding begin_write."""

    def __init__(self, file_path: str):
        super().__init__(
            f"No pending mutation for {file_path}; call begin_write first",
            details={"file_path": file_path},
        )
        self.file_path = file_path


class InvalidPatchError(MutationError):
    """Raised when a line patch does not fit the target content."""

    def __init__(self, reason: str, line_start: int, line_count: int):
        super().__init__(
            f"Invalid patch: {reason}",
            details={"line_start": str(line_start), "line_count": str(line_count)},
        )
        self.reason = reason
        self.line_start = line_start
        self.line_count = line_count
