"""Ingestion outcomes.

IngestResult replaces exception-based signalling on the ingest path: every
call to ``ingest()`` returns one, and a failed field update is a normal
VALUE_ERROR result carrying the IngestError that went to the error sink.
"""

from __future__ import annotations

from dataclasses import dataclass

from provstore.contracts.enums import IngestStatus
from provstore.contracts.errors import IngestError

_ERROR_STATUSES = frozenset({IngestStatus.REJECTED, IngestStatus.VALUE_ERROR})


@dataclass(frozen=True)
class IngestResult:
    """Result of ingesting one report entry.

    Invariants:
        - REJECTED and VALUE_ERROR carry an error
        - All other statuses carry none

    Example:
        result = store.ingest(entry)
        match result.status:
            case IngestStatus.BUFFERED:
                log.debug("waiting for wf-name", run_id=entry.run_id)
            case IngestStatus.VALUE_ERROR:
                counts[result.error.kind] += 1
    """

    status: IngestStatus
    error: IngestError | None = None
    created_invocation: bool = False
    released: int = 0

    def __post_init__(self) -> None:
        if self.status in _ERROR_STATUSES and self.error is None:
            raise ValueError(f"{self.status} result requires an error")
        if self.status not in _ERROR_STATUSES and self.error is not None:
            raise ValueError(f"{self.status} result must not carry an error")

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def applied(cls, *, created_invocation: bool = False, released: int = 0) -> IngestResult:
        return cls(IngestStatus.APPLIED, created_invocation=created_invocation, released=released)

    @classmethod
    def ignored(cls, *, created_invocation: bool = False) -> IngestResult:
        return cls(IngestStatus.IGNORED, created_invocation=created_invocation)

    @classmethod
    def buffered(cls) -> IngestResult:
        return cls(IngestStatus.BUFFERED)

    @classmethod
    def rejected(cls, error: IngestError) -> IngestResult:
        return cls(IngestStatus.REJECTED, error=error)

    @classmethod
    def value_error(cls, error: IngestError, *, created_invocation: bool = False) -> IngestResult:
        return cls(IngestStatus.VALUE_ERROR, error=error, created_invocation=created_invocation)
