"""All keys, kinds and statuses used across subsystem boundaries.

EntryKey values are the wire strings emitted by the reporting layer. Keys
outside this vocabulary are legal in a report stream; they simply carry
nothing this store indexes.
"""

from enum import StrEnum


class EntryKey(StrEnum):
    """Recognized report entry keys.

    Values match the strings written by the Cuneiform/Hi-WAY reporting layer.
    """

    WORKFLOW_NAME = "wf-name"
    INVOCATION_TIME = "invoc-time"
    INVOCATION_HOST = "invoc-host"
    FILE_SIZE_STAGE_IN = "file-size-stagein"
    FILE_SIZE_STAGE_OUT = "file-size-stageout"
    FILE_TIME_STAGE_IN = "file-time-stagein"
    FILE_TIME_STAGE_OUT = "file-time-stageout"

    @classmethod
    def lookup(cls, key: str) -> "EntryKey | None":
        """Return the matching key, or None for keys outside the vocabulary."""
        try:
            return cls(key)
        except ValueError:
            return None


class FileDirection(StrEnum):
    """Which of an invocation's file sets a record lives in."""

    INPUT = "input"
    OUTPUT = "output"


class EntityScope(StrEnum):
    """Entity a recognized key writes to.

    Values:
        RUN: run -> workflow binding, no invocation needed
        INVOCATION: a field of the invocation record
        FILE: a field of one file record of the invocation
    """

    RUN = "run"
    INVOCATION = "invocation"
    FILE = "file"


class IngestStatus(StrEnum):
    """Outcome of ingesting a single report entry."""

    APPLIED = "applied"
    IGNORED = "ignored"
    BUFFERED = "buffered"
    REJECTED = "rejected"
    VALUE_ERROR = "value_error"


class ErrorKind(StrEnum):
    """Classification of problems reported to the error sink.

    Values:
        VALUE_FORMAT: Entry value could not be parsed for its key
        MISSING_WORKFLOW_BINDING: Invocation seen before its run's wf-name entry
        MISSING_INVOCATION: Invocation-scoped key on an entry without invocId
        MISSING_FIELD: Entry lacks a field its key needs (taskId, file)
        PENDING_OVERFLOW: Pending buffer full, entry dropped
        MALFORMED_ENTRY: Report log line is not a valid report entry
    """

    VALUE_FORMAT = "value_format"
    MISSING_WORKFLOW_BINDING = "missing_workflow_binding"
    MISSING_INVOCATION = "missing_invocation"
    MISSING_FIELD = "missing_field"
    PENDING_OVERFLOW = "pending_overflow"
    MALFORMED_ENTRY = "malformed_entry"


class PendingPolicy(StrEnum):
    """What to do with an invocation entry whose run has no workflow yet."""

    BUFFER = "buffer"
    REJECT = "reject"
