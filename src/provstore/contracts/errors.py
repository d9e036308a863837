"""Error contracts for report ingestion.

IngestError is the value handed to the error sink; it never unwinds past a
single entry. ValueFormatError is the internal signal raised by value
parsers and converted to an IngestError at the value-application boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from provstore.contracts.enums import ErrorKind

if TYPE_CHECKING:
    from uuid import UUID


@dataclass(frozen=True)
class IngestError:
    """A problem found while ingesting one report entry.

    Attributes:
        kind: Classification of the problem
        message: Human-readable description
        key: Report entry key (raw string, may be outside the vocabulary)
        run_id: Run the entry belongs to, if known
        invoc_id: Invocation the entry refers to, if any
        file_name: File the entry refers to, if any
    """

    kind: ErrorKind
    message: str
    key: str | None = None
    run_id: UUID | None = None
    invoc_id: int | None = None
    file_name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ErrorKind):
            raise TypeError(f"kind must be ErrorKind, got {type(self.kind).__name__}: {self.kind!r}")

    def to_log_fields(self) -> dict[str, object]:
        """Structured fields for a log event (None values dropped)."""
        fields: dict[str, object] = {
            "kind": self.kind.value,
            "key": self.key,
            "run_id": str(self.run_id) if self.run_id is not None else None,
            "invoc_id": self.invoc_id,
            "file_name": self.file_name,
        }
        return {k: v for k, v in fields.items() if v is not None}


class ValueFormatError(ValueError):
    """Raised when a report entry value cannot be read for its key.

    Examples: a non-integer stage-in size, a structured value without a
    ``realTime`` field, a JSON object where a host name was expected.
    """
