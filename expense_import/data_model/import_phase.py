from enum import Enum


class ImportPhase(Enum):
    """
    Lifecycle of one bulk import.

    IDLE -> LOADING -> REVIEWING -> SUBMITTING -> RECONCILING -> DONE | PARTIAL_FAILURE
    """
    IDLE = "IDLE"
    LOADING = "LOADING"
    REVIEWING = "REVIEWING"
    SUBMITTING = "SUBMITTING"
    RECONCILING = "RECONCILING"
    DONE = "DONE"
    PARTIAL_FAILURE = "PARTIAL_FAILURE"

    @property
    def is_editable(self) -> bool:
        return self in (ImportPhase.REVIEWING, ImportPhase.PARTIAL_FAILURE)

    @property
    def in_flight(self) -> bool:
        return self in (ImportPhase.SUBMITTING, ImportPhase.RECONCILING)
