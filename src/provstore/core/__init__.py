"""Core infrastructure: configuration, logging, diagnostics and the provenance store."""

from provstore.core.config import (
    IngestionSettings,
    LoggingSettings,
    ProvstoreSettings,
    load_settings,
)
from provstore.core.diagnostics import (
    CollectingErrorSink,
    ErrorSink,
    FanOutErrorSink,
    LoggingErrorSink,
    NullErrorSink,
)
from provstore.core.provenance import ProvenanceStore
from provstore.core.report_log import read_report_log

__all__ = [
    "CollectingErrorSink",
    "ErrorSink",
    "FanOutErrorSink",
    "IngestionSettings",
    "LoggingErrorSink",
    "LoggingSettings",
    "NullErrorSink",
    "ProvenanceStore",
    "ProvstoreSettings",
    "load_settings",
    "read_report_log",
]
