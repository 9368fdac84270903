"""MutationOrchestrator: snapshot, validate, and roll back one write at a time.

Lifecycle of a governed path::

    Idle -> Snapshotting -> Validating -> Committed
                                       -> RollingBack -> Idle
                                                      -> Failed

``begin_write`` snapshots the current content; the caller then writes the
proposed content and hands it to ``complete_write``. Invalid content is
replaced with the content captured by ``begin_write`` (its most recent
snapshot) through the file collaborator.
Paths without a governed extension go straight to Committed.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .. import patching
from ..config import DEFAULT_CONFIG, GuardConfig
from ..exceptions import LuaguardError, MutationInProgressError, NoPendingMutationError
from ..file_ops import FileAccess
from ..history import PatchSummary, RollbackResult, VersionStore
from ..logging_config import get_logger
from ..validation import StructuralValidator, ValidationResult

logger = get_logger(__name__)

ROLLBACK_FAILED_MESSAGE = "critical: syntax invalid and rollback failed"


class MutationState(Enum):
    IDLE = "idle"
    SNAPSHOTTING = "snapshotting"
    VALIDATING = "validating"
    COMMITTED = "committed"
    ROLLING_BACK = "rolling_back"
    FAILED = "failed"


# States in which a path has a mutation in flight
_IN_FLIGHT = frozenset(
    {MutationState.SNAPSHOTTING, MutationState.VALIDATING, MutationState.ROLLING_BACK}
)


@dataclass(frozen=True)
class MutationOutcome:
    """Result of one mutation attempt.

    ``rollback_performed`` is None when no rollback was needed, True when
    the snapshot was written back and False when writing it back failed
    (``error`` then carries the fatal message).
    """

    success: bool
    validation_result: Optional[ValidationResult] = None
    rollback_performed: Optional[bool] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {"success": self.success}
        if self.validation_result is not None:
            data["validation_result"] = self.validation_result.to_dict()
        if self.rollback_performed is not None:
            data["rollback_performed"] = self.rollback_performed
        if self.error is not None:
            data["error"] = self.error
        return data


class MutationOrchestrator:
    """Runs mutation attempts against injected collaborators.

    Args:
        version_store: Where pre-write snapshots go
        validator: Structural validator for proposed content
        files: File collaborator used for commit writes and rollbacks
        config: Decides which paths are governed
    """

    def __init__(
        self,
        version_store: VersionStore,
        validator: StructuralValidator,
        files: FileAccess,
        config: GuardConfig = DEFAULT_CONFIG,
    ) -> None:
        self.version_store = version_store
        self.validator = validator
        self.files = files
        self.config = config
        self._states: Dict[str, MutationState] = {}
        self._pending: Dict[str, str] = {}
        self._lock = threading.Lock()

    def state(self, path: str) -> MutationState:
        with self._lock:
            return self._states.get(path, MutationState.IDLE)

    def _set_state(self, path: str, state: MutationState) -> None:
        with self._lock:
            self._states[path] = state
        logger.debug(f"{path}: {state.value}")

    # -- two-step protocol --

    def begin_write(
        self, path: str, current_content: str, patch_summary: Optional[PatchSummary] = None
    ) -> None:
        """Snapshot ``current_content`` before the caller overwrites ``path``.

        Raises:
            MutationInProgressError: If ``path`` already has a mutation in flight
        """
        with self._lock:
            state = self._states.get(path, MutationState.IDLE)
            if state in _IN_FLIGHT:
                raise MutationInProgressError(path, state.value)
            if not self.config.is_governed(path):
                self._states[path] = MutationState.COMMITTED
                return
            self._states[path] = MutationState.SNAPSHOTTING
            self._pending[path] = current_content

        self.version_store.save_snapshot(path, current_content, patch_summary)

    def complete_write(self, path: str, proposed_content: str) -> MutationOutcome:
        """Validate content the caller has written to ``path``.

        Raises:
            NoPendingMutationError: If ``begin_write`` was not called first
        """
        if not self.config.is_governed(path):
            self._set_state(path, MutationState.COMMITTED)
            return MutationOutcome(success=True)

        with self._lock:
            if self._states.get(path) is not MutationState.SNAPSHOTTING:
                raise NoPendingMutationError(path)
            self._states[path] = MutationState.VALIDATING
            previous = self._pending[path]

        result = self.validator.validate(previous, proposed_content, mode="write", file=path)
        if result.is_valid:
            with self._lock:
                self._pending.pop(path, None)
                self._states[path] = MutationState.COMMITTED
            logger.debug(f"{path}: write committed")
            return MutationOutcome(success=True, validation_result=result)

        self._set_state(path, MutationState.ROLLING_BACK)
        return self._roll_back(path, result)

    def _roll_back(self, path: str, result: ValidationResult) -> MutationOutcome:
        # What begin_write captured; the store may have been cleared since
        with self._lock:
            previous = self._pending.pop(path, "")
        try:
            self.files.write(path, previous)
        except (OSError, LuaguardError) as e:
            self._set_state(path, MutationState.FAILED)
            logger.error(f"{path}: {ROLLBACK_FAILED_MESSAGE} ({e})")
            return MutationOutcome(
                success=False,
                validation_result=result,
                rollback_performed=False,
                error=ROLLBACK_FAILED_MESSAGE,
            )

        self._set_state(path, MutationState.IDLE)
        logger.warning(
            f"{path}: rejected write rolled back to its previous content "
            f"({len(result.errors)} structural error(s))"
        )
        return MutationOutcome(success=False, validation_result=result, rollback_performed=True)

    def _abandon(self, path: str) -> None:
        with self._lock:
            self._pending.pop(path, None)
            self._states[path] = MutationState.IDLE

    # -- one-call helpers --

    def mutate(self, path: str, proposed_content: str) -> MutationOutcome:
        """Read, snapshot, write and validate a whole-content replacement.

        A missing file counts as empty, so a rejected first write leaves an
        empty file behind.
        """
        try:
            current = self.files.read(path)
        except FileNotFoundError:
            current = ""

        summary = patching.summarize_diff(current, proposed_content)
        return self._write_through(path, current, proposed_content, summary)

    def apply_patch(self, patch: patching.PatchOperation) -> MutationOutcome:
        """Apply a line patch to its script through the same pipeline.

        Raises:
            InvalidPatchError: If the patch does not fit the current content
        """
        path = patch.script_path
        current = self.files.read(path)
        proposed = patching.apply_patch(current, patch)
        return self._write_through(path, current, proposed, patching.summarize_patch(patch))

    def _write_through(
        self, path: str, current: str, proposed: str, summary: PatchSummary
    ) -> MutationOutcome:
        self.begin_write(path, current, summary)
        try:
            self.files.write(path, proposed)
        except (OSError, LuaguardError):
            self._abandon(path)
            raise
        return self.complete_write(path, proposed)

    def restore(self, path: str, version: Optional[int] = None) -> RollbackResult:
        """Write a stored snapshot back to ``path``.

        Raises:
            MutationInProgressError: If ``path`` has a mutation in flight
            SnapshotNotFoundError: Unknown path or version
        """
        state = self.state(path)
        if state in _IN_FLIGHT:
            raise MutationInProgressError(path, state.value)

        result = self.version_store.rollback(path, version)
        self.files.write(path, result.content)
        logger.warning(f"{path}: restored snapshot {result.version}")
        return result
