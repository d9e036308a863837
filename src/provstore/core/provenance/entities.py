# src/provstore/core/provenance/entities.py
"""Entity store: canonical provenance records and their indices.

Indices maintained:
    run id        -> workflow name      (first binding wins)
    workflow name -> task ids           (grow-only)
    task id       -> task name          (first non-empty name wins)
    task id       -> workflow name      (no re-parenting)
    invocation id -> InvocationRecord   (copy-on-write)
    host names                          (grow-only)

Thread Safety:
    Every index insert and record swap happens under one re-entrant lock.
    Records are frozen and replaced whole, so readers never see a partially
    built invocation or file record. Check-and-create operations
    (get_or_create_invocation, ensure_file) are atomic: concurrent duplicate
    ingestion of one invocation id converges to a single record.

Nothing is ever removed. Unknown ids on the read side return None; the
setters require the target to exist (the dispatcher materializes it first)
and raise KeyError otherwise.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from uuid import UUID

import structlog

from provstore.contracts.enums import FileDirection
from provstore.contracts.records import FileRecord, InvocationRecord, StoreSummary

logger = structlog.get_logger(__name__)


class EntityStore:
    """In-memory home of every run, workflow, task, invocation and host."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._run_workflows: dict[UUID, str] = {}
        self._workflow_tasks: dict[str, set[int]] = {}
        self._task_names: dict[int, str] = {}
        self._task_workflows: dict[int, str] = {}
        self._invocations: dict[int, InvocationRecord] = {}
        self._hosts: set[str] = set()

    # ------------------------------------------------------------------
    # Runs and workflows
    # ------------------------------------------------------------------

    def bind_run_to_workflow(self, run_id: UUID, workflow_name: str) -> bool:
        """Bind a run to its workflow, creating the workflow if needed.

        Idempotent: the first binding for a run wins.

        Returns:
            True if this call created the binding.
        """
        with self._lock:
            bound = self._run_workflows.get(run_id)
            if bound is not None:
                if bound != workflow_name:
                    logger.warning(
                        "Conflicting workflow binding ignored",
                        run_id=str(run_id),
                        bound_workflow=bound,
                        ignored_workflow=workflow_name,
                    )
                return False
            self._run_workflows[run_id] = workflow_name
            self._workflow_tasks.setdefault(workflow_name, set())
        logger.debug("Run bound to workflow", run_id=str(run_id), workflow=workflow_name)
        return True

    def workflow_for_run(self, run_id: UUID) -> str | None:
        with self._lock:
            return self._run_workflows.get(run_id)

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def register_task_for_workflow(self, workflow_name: str, task_id: int, task_name: str | None) -> None:
        """Add a task to a workflow and record its name.

        The first workflow a task is registered under owns it for the life
        of the store; registration under another workflow is ignored. The
        first non-empty name recorded for a task id is kept.
        """
        with self._lock:
            owner = self._task_workflows.setdefault(task_id, workflow_name)
            if owner != workflow_name:
                logger.warning(
                    "Task already belongs to another workflow",
                    task_id=task_id,
                    owner_workflow=owner,
                    ignored_workflow=workflow_name,
                )
            else:
                self._workflow_tasks.setdefault(workflow_name, set()).add(task_id)
            if task_name and task_id not in self._task_names:
                self._task_names[task_id] = task_name

    def task_ids_for_workflow(self, workflow_name: str) -> frozenset[int] | None:
        """Task ids of a workflow, or None if the workflow is unknown."""
        with self._lock:
            task_ids = self._workflow_tasks.get(workflow_name)
            if task_ids is None:
                return None
            return frozenset(task_ids)

    def task_name(self, task_id: int) -> str | None:
        with self._lock:
            return self._task_names.get(task_id)

    def workflow_for_task(self, task_id: int) -> str | None:
        with self._lock:
            return self._task_workflows.get(task_id)

    def workflow_names(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._workflow_tasks)

    # ------------------------------------------------------------------
    # Invocations
    # ------------------------------------------------------------------

    def get_or_create_invocation(self, invoc_id: int, timestamp: int, task_id: int) -> tuple[InvocationRecord, bool]:
        """Return the invocation for ``invoc_id``, creating it if absent.

        timestamp and task_id are only used on creation; an existing record
        keeps the identity fields of the entry that created it.

        Returns:
            (record, created)
        """
        with self._lock:
            existing = self._invocations.get(invoc_id)
            if existing is not None:
                return existing, False
            record = InvocationRecord(invoc_id=invoc_id, task_id=task_id, timestamp=timestamp)
            self._invocations[invoc_id] = record
            return record, True

    def has_invocation(self, invoc_id: int) -> bool:
        with self._lock:
            return invoc_id in self._invocations

    def get_invocation(self, invoc_id: int) -> InvocationRecord | None:
        with self._lock:
            return self._invocations.get(invoc_id)

    def invocations(self) -> list[InvocationRecord]:
        """Every invocation record, in creation order."""
        with self._lock:
            return list(self._invocations.values())

    def set_invocation_host(self, invoc_id: int, host_name: str) -> InvocationRecord:
        """Set the execution host of an invocation.

        The host is set once. A later, different host for the same
        invocation is ignored and logged.
        """
        with self._lock:
            record = self._invocations[invoc_id]
            if record.host_name is not None:
                if record.host_name != host_name:
                    logger.warning(
                        "Invocation host already set",
                        invoc_id=invoc_id,
                        host=record.host_name,
                        ignored_host=host_name,
                    )
                return record
            record = replace(record, host_name=host_name)
            self._invocations[invoc_id] = record
            return record

    def set_invocation_real_time(self, invoc_id: int, real_time: int) -> InvocationRecord:
        with self._lock:
            record = replace(self._invocations[invoc_id], real_time=real_time)
            self._invocations[invoc_id] = record
            return record

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def ensure_file(self, invoc_id: int, direction: FileDirection, file_name: str) -> bool:
        """Track ``file_name`` in one direction of an invocation.

        Returns:
            True if the file record was created by this call.
        """
        with self._lock:
            record = self._invocations[invoc_id]
            if file_name in record.files(direction):
                return False
            self._invocations[invoc_id] = record.with_file(direction, FileRecord(file_name=file_name))
            return True

    def set_file_size(self, invoc_id: int, direction: FileDirection, file_name: str, size: int) -> FileRecord:
        with self._lock:
            return self._swap_file(invoc_id, direction, file_name, size=size)

    def set_file_real_time(self, invoc_id: int, direction: FileDirection, file_name: str, real_time: int) -> FileRecord:
        with self._lock:
            return self._swap_file(invoc_id, direction, file_name, real_time=real_time)

    def _swap_file(self, invoc_id: int, direction: FileDirection, file_name: str, **changes: int) -> FileRecord:
        # Caller holds the lock
        record = self._invocations[invoc_id]
        updated = replace(record.files(direction)[file_name], **changes)
        self._invocations[invoc_id] = record.with_file(direction, updated)
        return updated

    # ------------------------------------------------------------------
    # Hosts
    # ------------------------------------------------------------------

    def record_host(self, host_name: str) -> bool:
        """Add a host name. Returns True if it was not seen before."""
        with self._lock:
            if host_name in self._hosts:
                return False
            self._hosts.add(host_name)
            return True

    def host_names(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._hosts)

    # ------------------------------------------------------------------
    # Summary
    # ------------------------------------------------------------------

    def summary(self, *, pending_entries: int = 0) -> StoreSummary:
        with self._lock:
            return StoreSummary(
                runs=len(self._run_workflows),
                workflows=len(self._workflow_tasks),
                tasks=len(self._task_workflows),
                invocations=len(self._invocations),
                hosts=len(self._hosts),
                input_files=sum(len(r.input_files) for r in self._invocations.values()),
                output_files=sum(len(r.output_files) for r in self._invocations.values()),
                pending_entries=pending_entries,
            )
