"""Provenance record contracts.

Records are immutable. The entity store replaces a record whole on every
field update, so a reader holding a record always sees a consistent
version and can never mutate store state through it.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType

from provstore.contracts.enums import FileDirection

def _no_files() -> Mapping[str, FileRecord]:
    return MappingProxyType({})


@dataclass(frozen=True)
class FileRecord:
    """A file staged into or out of one invocation.

    size and real_time stay None until the matching entry arrives.
    """

    file_name: str
    size: int | None = None
    real_time: int | None = None


@dataclass(frozen=True)
class InvocationRecord:
    """One execution attempt of a task.

    invoc_id, task_id and timestamp are fixed by the first entry seen for
    the invocation. Everything else is filled in by later entries.
    """

    invoc_id: int
    task_id: int
    timestamp: int
    host_name: str | None = None
    real_time: int | None = None
    input_files: Mapping[str, FileRecord] = field(default_factory=_no_files, hash=False)
    output_files: Mapping[str, FileRecord] = field(default_factory=_no_files, hash=False)

    def files(self, direction: FileDirection) -> Mapping[str, FileRecord]:
        """File records for one direction, keyed by file name."""
        if direction is FileDirection.INPUT:
            return self.input_files
        return self.output_files

    def input_file(self, file_name: str) -> FileRecord | None:
        return self.input_files.get(file_name)

    def output_file(self, file_name: str) -> FileRecord | None:
        return self.output_files.get(file_name)

    def with_file(self, direction: FileDirection, record: FileRecord) -> InvocationRecord:
        """Return a copy with ``record`` stored under its name in ``direction``."""
        files = dict(self.files(direction))
        files[record.file_name] = record
        frozen = MappingProxyType(files)
        if direction is FileDirection.INPUT:
            return replace(self, input_files=frozen)
        return replace(self, output_files=frozen)


@dataclass(frozen=True)
class StoreSummary:
    """Entity counts at one point in time."""

    runs: int
    workflows: int
    tasks: int
    invocations: int
    hosts: int
    input_files: int
    output_files: int
    pending_entries: int
