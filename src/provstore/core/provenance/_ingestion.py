# src/provstore/core/provenance/_ingestion.py
"""Ingestion dispatcher methods for ProvenanceStore."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

from provstore.contracts.entries import ReportEntry
from provstore.contracts.enums import EntityScope, ErrorKind, IngestStatus, PendingPolicy
from provstore.contracts.errors import IngestError
from provstore.contracts.results import IngestResult
from provstore.core.provenance.dispatch import ValueRule, apply_value, rule_for

if TYPE_CHECKING:
    from uuid import UUID

    from provstore.core.diagnostics import ErrorSink
    from provstore.core.provenance.entities import EntityStore
    from provstore.core.provenance.pending import PendingBuffer

logger = structlog.get_logger(__name__)


class IngestionMixin:
    """Turns report entries into entity store mutations. Mixed into ProvenanceStore.

    Per entry:
        0. wf-name entries bind their run first and release parked entries
        1. an unseen invocation id materializes the invocation and registers
           its task under the run's workflow (or parks/rejects the entry if
           the run is not bound yet)
        2. file-scoped keys make sure the file record exists
        3. the key's ValueRule applies the value
    """

    # Shared state annotations (set by ProvenanceStore.__init__)
    _entities: EntityStore
    _pending: PendingBuffer
    _pending_policy: PendingPolicy
    _error_sink: ErrorSink

    def ingest(self, entry: ReportEntry) -> IngestResult:
        """Ingest one report entry.

        Never raises for bad report data: problems are reported to the
        error sink and returned as REJECTED / VALUE_ERROR results.
        """
        rule = rule_for(entry)
        if rule is not None and rule.scope is EntityScope.RUN:
            return self._ingest_run_entry(entry, rule)

        created, early = self._materialize(entry)
        if early is not None:
            return early

        if rule is None:
            return IngestResult.ignored(created_invocation=created)

        if entry.invoc_id is None:
            return self._reject(entry, ErrorKind.MISSING_INVOCATION, f"{entry.key} entry has no invocId")

        if rule.direction is not None:
            if entry.file_name is None:
                return self._reject(entry, ErrorKind.MISSING_FIELD, f"{entry.key} entry has no file")
            self._entities.ensure_file(entry.invoc_id, rule.direction, entry.file_name)

        return self._apply(entry, rule, created=created)

    def ingest_many(self, entries: Iterable[ReportEntry]) -> dict[IngestStatus, int]:
        """Ingest entries in order.

        Returns:
            Number of entries per outcome status.
        """
        counts: Counter[IngestStatus] = Counter()
        for entry in entries:
            counts[self.ingest(entry).status] += 1
        return dict(counts)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _ingest_run_entry(self, entry: ReportEntry, rule: ValueRule) -> IngestResult:
        error = apply_value(self._entities, entry, rule)
        if error is not None:
            self._error_sink.report(error)
            return IngestResult.value_error(error)
        released = self._release_pending(entry.run_id)
        if entry.task_id is None:
            # Binding stands alone; no invocation to create
            return IngestResult.applied(released=released)
        created, early = self._materialize(entry)
        if early is not None:
            return early
        return IngestResult.applied(created_invocation=created, released=released)

    def _materialize(self, entry: ReportEntry) -> tuple[bool, IngestResult | None]:
        """Create the entry's invocation on first sight.

        Returns:
            (created, early_result). early_result is set when the entry
            cannot proceed (parked or rejected).
        """
        if entry.invoc_id is None or self._entities.has_invocation(entry.invoc_id):
            return False, None
        workflow_name = self._entities.workflow_for_run(entry.run_id)
        if workflow_name is None:
            return False, self._defer(entry)
        if entry.task_id is None:
            return False, self._reject(entry, ErrorKind.MISSING_FIELD, "invocation entry has no taskId")
        self._entities.register_task_for_workflow(workflow_name, entry.task_id, entry.task_name)
        _, created = self._entities.get_or_create_invocation(entry.invoc_id, entry.timestamp, entry.task_id)
        return created, None

    def _apply(self, entry: ReportEntry, rule: ValueRule, *, created: bool) -> IngestResult:
        error = apply_value(self._entities, entry, rule)
        if error is not None:
            self._error_sink.report(error)
            return IngestResult.value_error(error, created_invocation=created)
        return IngestResult.applied(created_invocation=created)

    # ------------------------------------------------------------------
    # Ordering precondition
    # ------------------------------------------------------------------

    def _defer(self, entry: ReportEntry) -> IngestResult:
        if self._pending_policy is PendingPolicy.REJECT:
            return self._reject(
                entry,
                ErrorKind.MISSING_WORKFLOW_BINDING,
                "invocation entry arrived before its run's workflow binding",
            )
        if not self._pending.offer(entry):
            return self._reject(
                entry,
                ErrorKind.PENDING_OVERFLOW,
                f"pending buffer full ({self._pending.max_entries} entries), entry dropped",
            )
        logger.debug(
            "Entry parked until workflow binding",
            run_id=str(entry.run_id),
            invoc_id=entry.invoc_id,
            key=entry.key,
        )
        # A binding ingested between the lookup and the offer would strand the entry
        if self._entities.workflow_for_run(entry.run_id) is not None:
            self._release_pending(entry.run_id)
        return IngestResult.buffered()

    def _release_pending(self, run_id: UUID) -> int:
        parked = self._pending.drain(run_id)
        for entry in parked:
            self.ingest(entry)
        if parked:
            logger.info("Released parked entries", run_id=str(run_id), count=len(parked))
        return len(parked)

    def _reject(self, entry: ReportEntry, kind: ErrorKind, message: str) -> IngestResult:
        error = IngestError(
            kind=kind,
            message=message,
            key=entry.key,
            run_id=entry.run_id,
            invoc_id=entry.invoc_id,
            file_name=entry.file_name,
        )
        self._error_sink.report(error)
        return IngestResult.rejected(error)
