"""Provenance: ingestion and indexing of workflow execution reports.

Primary API:
    ProvenanceStore - ingest report entries, query derived statistics

Building blocks:
    EntityStore - canonical records and indices
    PendingBuffer - entries waiting for their run's workflow binding
    ValueRule, RULES - key -> entity field mapping
"""

from provstore.core.provenance.dispatch import RULES, ValueRule, apply_value, rule_for
from provstore.core.provenance.entities import EntityStore
from provstore.core.provenance.pending import PendingBuffer
from provstore.core.provenance.store import ProvenanceStore

__all__ = [
    "RULES",
    "EntityStore",
    "PendingBuffer",
    "ProvenanceStore",
    "ValueRule",
    "apply_value",
    "rule_for",
]
