"""Safe-mutation pipeline: snapshot, validate, roll back."""

from .orchestrator import (
    ROLLBACK_FAILED_MESSAGE,
    MutationOrchestrator,
    MutationOutcome,
    MutationState,
)

__all__ = [
    "ROLLBACK_FAILED_MESSAGE",
    "MutationOrchestrator",
    "MutationOutcome",
    "MutationState",
]
