"""Error sinks for ingestion diagnostics.

The dispatcher never raises for bad report data. It hands an IngestError to
an ErrorSink and moves on to the next entry. Which channel the error ends up
in is the owning component's choice:

- LoggingErrorSink: structured warning through structlog (default)
- CollectingErrorSink: keeps errors in memory (CLI summaries, tests)
- NullErrorSink: discards everything
- FanOutErrorSink: forwards to several sinks in order
"""

from __future__ import annotations

from collections import Counter
from typing import Protocol

import structlog

from provstore.contracts.enums import ErrorKind
from provstore.contracts.errors import IngestError


class ErrorSink(Protocol):
    """Receiver for ingestion errors.

    Implementations must not raise for a well-formed IngestError; an
    exception here would abort the entry stream the sink exists to protect.
    """

    def report(self, error: IngestError) -> None:
        """Record one ingestion error."""
        ...


class LoggingErrorSink:
    """Logs each error as a structured warning."""

    def __init__(self, logger_name: str = "provstore.ingest") -> None:
        self._logger = structlog.get_logger(logger_name)

    def report(self, error: IngestError) -> None:
        self._logger.warning(error.message, **error.to_log_fields())


class CollectingErrorSink:
    """Keeps every reported error, in arrival order.

    Example:
        sink = CollectingErrorSink()
        store = ProvenanceStore(error_sink=sink)
        store.ingest_many(entries)
        if sink.errors:
            print(sink.counts_by_kind())
    """

    def __init__(self) -> None:
        self.errors: list[IngestError] = []

    def report(self, error: IngestError) -> None:
        self.errors.append(error)

    def counts_by_kind(self) -> dict[ErrorKind, int]:
        return dict(Counter(error.kind for error in self.errors))

    def __len__(self) -> int:
        return len(self.errors)


class NullErrorSink:
    """Discards errors. Use only where losing the diagnostics is acceptable."""

    def report(self, error: IngestError) -> None:
        pass


class FanOutErrorSink:
    """Forwards every error to each wrapped sink."""

    def __init__(self, *sinks: ErrorSink) -> None:
        self._sinks = sinks

    def report(self, error: IngestError) -> None:
        for sink in self._sinks:
            sink.report(error)
