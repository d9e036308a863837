# src/provstore/core/report_log.py
"""Report log replay.

A report log is a JSON-lines file, one report entry object per line, as
written by the workers' reporting layer. Replaying it into a fresh
ProvenanceStore rebuilds the store's state.

Lines that are not valid report entries are reported to the error sink as
MALFORMED_ENTRY and skipped; the rest of the log is still read.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import ValidationError

from provstore.contracts.entries import ReportEntry
from provstore.contracts.enums import ErrorKind
from provstore.contracts.errors import IngestError
from provstore.core.diagnostics import ErrorSink


def _contains_surrogateescape_chars(value: str) -> bool:
    """Return True when value contains surrogateescape-decoded bytes."""
    return any(0xDC80 <= ord(char) <= 0xDCFF for char in value)


def parse_report_lines(lines: Iterable[str], error_sink: ErrorSink, *, source: str = "<stream>") -> Iterator[ReportEntry]:
    """Parse report entries from JSON lines, skipping blank and malformed ones.

    Args:
        lines: Text lines (trailing newlines allowed)
        error_sink: Receives one MALFORMED_ENTRY error per bad line
        source: Name used in error messages
    """
    for line_number, line in enumerate(lines, start=1):
        text = line.strip()
        if not text:
            continue
        if _contains_surrogateescape_chars(text):
            error_sink.report(
                IngestError(
                    kind=ErrorKind.MALFORMED_ENTRY,
                    message=f"{source}:{line_number}: <entry>: invalid utf-8 encoding",
                )
            )
            continue
        try:
            entry = ReportEntry.model_validate_json(text)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "<entry>"
            error_sink.report(
                IngestError(
                    kind=ErrorKind.MALFORMED_ENTRY,
                    message=f"{source}:{line_number}: {location}: {first['msg']}",
                )
            )
            continue
        yield entry


def read_report_log(path: Path, error_sink: ErrorSink) -> Iterator[ReportEntry]:
    """Stream report entries from a JSON-lines file.

    Raises:
        FileNotFoundError: If the log file doesn't exist
    """
    # Undecodable bytes become lone surrogates and are reported per line
    with path.open(encoding="utf-8", errors="surrogateescape") as fh:
        yield from parse_report_lines(fh, error_sink, source=str(path))
