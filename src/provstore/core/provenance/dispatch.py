# src/provstore/core/provenance/dispatch.py
"""Kind -> field mapping for report entry values.

Each recognized EntryKey has exactly one ValueRule naming the entity scope
it writes to and a pure function that reads the entry value and applies it
to the EntityStore. Keys without a rule are not indexed by this store.

Value parsers raise ValueFormatError; apply_value() converts that into an
IngestError so the ingest path never unwinds past one entry.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from provstore.contracts.entries import ReportEntry
from provstore.contracts.enums import EntityScope, EntryKey, ErrorKind, FileDirection
from provstore.contracts.errors import IngestError, ValueFormatError
from provstore.core.provenance.entities import EntityStore

# Signed decimal integer, no whitespace or separators (Java Long.parseLong)
_LONG_PATTERN = re.compile(r"[+-]?[0-9]+")

REAL_TIME_FIELD = "realTime"


@dataclass(frozen=True)
class ValueRule:
    """Where a recognized key's value goes.

    Attributes:
        key: The entry key this rule handles
        scope: Entity the value is written to
        target: Field name on that entity (for diagnostics)
        apply: Reads the entry value and writes it into the store
        direction: File set for FILE-scoped rules
    """

    key: EntryKey
    scope: EntityScope
    target: str
    apply: Callable[[EntityStore, ReportEntry], None]
    direction: FileDirection | None = None

    def __post_init__(self) -> None:
        if (self.scope is EntityScope.FILE) != (self.direction is not None):
            raise ValueError(f"{self.key}: direction must be set exactly for FILE-scoped rules")


# =============================================================================
# Value parsers
# =============================================================================


def parse_long(value: Any, what: str) -> int:
    """Read an integer the way the reporting layer writes one.

    Accepts ints, finite floats (truncated) and signed decimal strings.
    """
    match value:
        case bool():
            raise ValueFormatError(f"{what} must be an integer, got bool")
        case int():
            return value
        case float() if math.isfinite(value):
            return int(value)
        case str() if _LONG_PATTERN.fullmatch(value):
            return int(value)
        case _:
            raise ValueFormatError(f"{what} must be an integer, got {value!r}")


def parse_byte_count(entry: ReportEntry) -> int:
    """Byte count from the raw scalar value."""
    raw = entry.scalar_value()
    if not _LONG_PATTERN.fullmatch(raw):
        raise ValueFormatError(f"size is not an integer: {raw!r}")
    size = int(raw)
    if size < 0:
        raise ValueFormatError(f"size must be non-negative, got {size}")
    return size


def parse_real_time(entry: ReportEntry) -> int:
    """``realTime`` field of the structured value."""
    obj = entry.structured_value()
    if REAL_TIME_FIELD not in obj:
        raise ValueFormatError(f"structured value has no {REAL_TIME_FIELD!r} field")
    return parse_long(obj[REAL_TIME_FIELD], REAL_TIME_FIELD)


def parse_name(entry: ReportEntry, what: str) -> str:
    """Non-blank scalar value (workflow or host name)."""
    name = entry.scalar_value()
    if not name.strip():
        raise ValueFormatError(f"{what} is blank")
    return name


# =============================================================================
# Appliers
# =============================================================================


def _invoc_id(entry: ReportEntry) -> int:
    # The dispatcher checks scope requirements before any applier runs
    if entry.invoc_id is None:
        raise ValueError(f"{entry.key} entry reached an invocation applier without invocId")
    return entry.invoc_id


def _file_name(entry: ReportEntry) -> str:
    if entry.file_name is None:
        raise ValueError(f"{entry.key} entry reached a file applier without file")
    return entry.file_name


def _bind_workflow(store: EntityStore, entry: ReportEntry) -> None:
    store.bind_run_to_workflow(entry.run_id, parse_name(entry, "workflow name"))


def _set_invocation_real_time(store: EntityStore, entry: ReportEntry) -> None:
    store.set_invocation_real_time(_invoc_id(entry), parse_real_time(entry))


def _set_invocation_host(store: EntityStore, entry: ReportEntry) -> None:
    host_name = parse_name(entry, "host name")
    store.set_invocation_host(_invoc_id(entry), host_name)
    store.record_host(host_name)


def _file_size_applier(direction: FileDirection) -> Callable[[EntityStore, ReportEntry], None]:
    def apply(store: EntityStore, entry: ReportEntry) -> None:
        store.set_file_size(_invoc_id(entry), direction, _file_name(entry), parse_byte_count(entry))

    return apply


def _file_time_applier(direction: FileDirection) -> Callable[[EntityStore, ReportEntry], None]:
    def apply(store: EntityStore, entry: ReportEntry) -> None:
        store.set_file_real_time(_invoc_id(entry), direction, _file_name(entry), parse_real_time(entry))

    return apply


_RULE_LIST: tuple[ValueRule, ...] = (
    ValueRule(EntryKey.WORKFLOW_NAME, EntityScope.RUN, "workflow_name", _bind_workflow),
    ValueRule(EntryKey.INVOCATION_TIME, EntityScope.INVOCATION, "real_time", _set_invocation_real_time),
    ValueRule(EntryKey.INVOCATION_HOST, EntityScope.INVOCATION, "host_name", _set_invocation_host),
    ValueRule(
        EntryKey.FILE_SIZE_STAGE_IN,
        EntityScope.FILE,
        "size",
        _file_size_applier(FileDirection.INPUT),
        FileDirection.INPUT,
    ),
    ValueRule(
        EntryKey.FILE_SIZE_STAGE_OUT,
        EntityScope.FILE,
        "size",
        _file_size_applier(FileDirection.OUTPUT),
        FileDirection.OUTPUT,
    ),
    ValueRule(
        EntryKey.FILE_TIME_STAGE_IN,
        EntityScope.FILE,
        "real_time",
        _file_time_applier(FileDirection.INPUT),
        FileDirection.INPUT,
    ),
    ValueRule(
        EntryKey.FILE_TIME_STAGE_OUT,
        EntityScope.FILE,
        "real_time",
        _file_time_applier(FileDirection.OUTPUT),
        FileDirection.OUTPUT,
    ),
)

RULES: Mapping[EntryKey, ValueRule] = MappingProxyType({rule.key: rule for rule in _RULE_LIST})


def rule_for(entry: ReportEntry) -> ValueRule | None:
    """Rule for the entry's key, or None if the key is not indexed."""
    key = entry.entry_key
    if key is None:
        return None
    return RULES[key]


def apply_value(store: EntityStore, entry: ReportEntry, rule: ValueRule) -> IngestError | None:
    """Apply one entry value through its rule.

    Returns:
        None on success, or the VALUE_FORMAT error describing the skipped update.
    """
    try:
        rule.apply(store, entry)
    except ValueFormatError as e:
        return IngestError(
            kind=ErrorKind.VALUE_FORMAT,
            message=f"{rule.key.value} -> {rule.scope.value}.{rule.target}: {e}",
            key=entry.key,
            run_id=entry.run_id,
            invoc_id=entry.invoc_id,
            file_name=entry.file_name,
        )
    return None
