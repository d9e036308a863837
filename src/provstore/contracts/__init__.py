"""Shared contracts for provstore.

This package contains the types that cross subsystem boundaries: report
entries (inbound), provenance records (outbound) and ingestion outcomes.

Import pattern:
    from provstore.contracts import ReportEntry, InvocationRecord, IngestStatus
"""

from provstore.contracts.entries import ReportEntry
from provstore.contracts.enums import (
    EntityScope,
    EntryKey,
    ErrorKind,
    FileDirection,
    IngestStatus,
    PendingPolicy,
)
from provstore.contracts.errors import IngestError, ValueFormatError
from provstore.contracts.records import FileRecord, InvocationRecord, StoreSummary
from provstore.contracts.results import IngestResult

__all__ = [
    "EntityScope",
    "EntryKey",
    "ErrorKind",
    "FileDirection",
    "FileRecord",
    "IngestError",
    "IngestResult",
    "IngestStatus",
    "InvocationRecord",
    "PendingPolicy",
    "ReportEntry",
    "StoreSummary",
    "ValueFormatError",
]
