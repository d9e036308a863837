# src/provstore/testing/__init__.py
"""Test infrastructure for provstore.

Factories for constructing report entries with sensible defaults. When the
ReportEntry constructor changes, update the factory here; tests and
benchmarks that use factories need no changes.

Usage:
    from provstore.testing import make_workflow_entry, make_host_entry

    run = new_run_id()
    store.ingest(make_workflow_entry(run, "wf-A"))
    store.ingest(make_host_entry(run, invoc_id=100, task_id=1, host="node7"))
"""

from __future__ import annotations

from typing import Any
from uuid import UUID, uuid4

from provstore.contracts.entries import ReportEntry
from provstore.contracts.enums import EntryKey, FileDirection

_STAGE_SIZE_KEYS = {
    FileDirection.INPUT: EntryKey.FILE_SIZE_STAGE_IN,
    FileDirection.OUTPUT: EntryKey.FILE_SIZE_STAGE_OUT,
}
_STAGE_TIME_KEYS = {
    FileDirection.INPUT: EntryKey.FILE_TIME_STAGE_IN,
    FileDirection.OUTPUT: EntryKey.FILE_TIME_STAGE_OUT,
}


def new_run_id() -> UUID:
    return uuid4()


def make_entry(
    run_id: UUID,
    key: str | EntryKey,
    value: str | dict[str, Any],
    *,
    timestamp: int = 1_000,
    invoc_id: int | None = None,
    task_id: int | None = None,
    task_name: str | None = None,
    file_name: str | None = None,
    lang: str | None = "bash",
) -> ReportEntry:
    """Build any report entry."""
    return ReportEntry(
        timestamp=timestamp,
        run_id=run_id,
        task_id=task_id,
        task_name=task_name,
        lang=lang,
        invoc_id=invoc_id,
        file_name=file_name,
        key=str(key),
        value=value,
    )


def make_workflow_entry(run_id: UUID, workflow_name: str, *, timestamp: int = 0) -> ReportEntry:
    """wf-name declaration binding ``run_id`` to ``workflow_name``."""
    return make_entry(run_id, EntryKey.WORKFLOW_NAME, workflow_name, timestamp=timestamp, lang=None)


def make_host_entry(
    run_id: UUID,
    *,
    invoc_id: int,
    task_id: int,
    host: str,
    task_name: str | None = None,
    timestamp: int = 1_000,
) -> ReportEntry:
    return make_entry(
        run_id,
        EntryKey.INVOCATION_HOST,
        host,
        timestamp=timestamp,
        invoc_id=invoc_id,
        task_id=task_id,
        task_name=task_name or f"task-{task_id}",
    )


def make_invocation_time_entry(
    run_id: UUID,
    *,
    invoc_id: int,
    task_id: int,
    real_time: Any,
    timestamp: int = 1_000,
) -> ReportEntry:
    return make_entry(
        run_id,
        EntryKey.INVOCATION_TIME,
        {"realTime": real_time},
        timestamp=timestamp,
        invoc_id=invoc_id,
        task_id=task_id,
        task_name=f"task-{task_id}",
    )


def make_file_size_entry(
    run_id: UUID,
    *,
    invoc_id: int,
    task_id: int,
    file_name: str,
    size: str | int,
    direction: FileDirection = FileDirection.INPUT,
    timestamp: int = 1_000,
) -> ReportEntry:
    return make_entry(
        run_id,
        _STAGE_SIZE_KEYS[direction],
        str(size),
        timestamp=timestamp,
        invoc_id=invoc_id,
        task_id=task_id,
        task_name=f"task-{task_id}",
        file_name=file_name,
    )


def make_file_time_entry(
    run_id: UUID,
    *,
    invoc_id: int,
    task_id: int,
    file_name: str,
    real_time: Any,
    direction: FileDirection = FileDirection.INPUT,
    timestamp: int = 1_000,
) -> ReportEntry:
    return make_entry(
        run_id,
        _STAGE_TIME_KEYS[direction],
        {"realTime": real_time},
        timestamp=timestamp,
        invoc_id=invoc_id,
        task_id=task_id,
        task_name=f"task-{task_id}",
        file_name=file_name,
    )
