"""Shared fixtures for provenance store tests.

Each test gets a fresh store; runs are bound to a workflow up front unless a
test is specifically about the ordering precondition.
"""

from uuid import UUID

import pytest

from provstore.core.provenance import EntityStore, ProvenanceStore
from provstore.testing import make_workflow_entry

WORKFLOW = "wf-A"


@pytest.fixture
def entities() -> EntityStore:
    return EntityStore()


@pytest.fixture
def bound_run(store: ProvenanceStore, run_id: UUID) -> UUID:
    """A run already bound to WORKFLOW in ``store``."""
    store.ingest(make_workflow_entry(run_id, WORKFLOW))
    return run_id
