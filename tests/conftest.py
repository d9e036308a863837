# tests/conftest.py
"""Shared test fixtures.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from uuid import UUID

import pytest
from hypothesis import Phase, Verbosity, settings

from provstore.core.diagnostics import CollectingErrorSink
from provstore.core.provenance import ProvenanceStore
from provstore.testing import new_run_id

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Timing varies on shared runners
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Store fixtures
# =============================================================================


@pytest.fixture
def error_sink() -> CollectingErrorSink:
    return CollectingErrorSink()


@pytest.fixture
def store(error_sink: CollectingErrorSink) -> ProvenanceStore:
    """Empty store wired to a collecting error sink."""
    return ProvenanceStore(error_sink=error_sink)


@pytest.fixture
def run_id() -> UUID:
    return new_run_id()
