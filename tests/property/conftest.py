# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Entry streams are drawn from deliberately small id pools so that
invocations, tasks and files collide often: the interesting behaviour
is what happens on the second, third and tenth sighting of an id.

Usage:
    from tests.property.conftest import bound_entry_streams

    @given(stream=bound_entry_streams())
    def test_something(stream: EntryStream) -> None:
        ...
"""

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS
#
# Tiers: STATE_MACHINE (200), STANDARD (100), QUICK (20)
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from hypothesis import strategies as st

from provstore.contracts import FileDirection, ReportEntry
from provstore.testing import (
    make_entry,
    make_file_size_entry,
    make_file_time_entry,
    make_host_entry,
    make_invocation_time_entry,
    make_workflow_entry,
)

# =============================================================================
# Id pools
# =============================================================================

RUN_IDS = (UUID(int=1), UUID(int=2))
WORKFLOWS = ("wf-A", "wf-B")

invoc_ids = st.integers(min_value=1, max_value=8)
task_ids = st.integers(min_value=1, max_value=3)
timestamps = st.integers(min_value=0, max_value=100)
run_ids = st.sampled_from(RUN_IDS)
host_names = st.sampled_from(["node1", "node2", "node3", "login"])
file_names = st.sampled_from(["reads.fq", "ref.fa", "out.bam"])
directions = st.sampled_from(list(FileDirection))

# Sizes as they appear on the wire, malformed ones included
byte_counts = st.one_of(
    st.integers(min_value=0, max_value=2**40).map(str),
    st.sampled_from(["", "-1", "12kb", "1.5", "lots"]),
)
real_times = st.one_of(
    st.integers(min_value=0, max_value=10**6),
    st.sampled_from(["", "fast", None]),
)


@dataclass(frozen=True)
class EntryStream:
    """Workflow bindings followed by invocation-level entries."""

    bindings: tuple[ReportEntry, ...]
    entries: tuple[ReportEntry, ...]

    def all(self) -> list[ReportEntry]:
        return [*self.bindings, *self.entries]


# =============================================================================
# Entry strategies
# =============================================================================


@st.composite
def invocation_entries(draw: st.DrawFn) -> ReportEntry:
    """One invocation-level entry of any recognized (or unrecognized) key."""
    run = draw(run_ids)
    invoc_id = draw(invoc_ids)
    task_id = draw(task_ids)
    timestamp = draw(timestamps)
    kind = draw(st.sampled_from(["host", "time", "size", "file_time", "other"]))
    match kind:
        case "host":
            return make_host_entry(run, invoc_id=invoc_id, task_id=task_id, host=draw(host_names), timestamp=timestamp)
        case "time":
            return make_invocation_time_entry(
                run, invoc_id=invoc_id, task_id=task_id, real_time=draw(real_times), timestamp=timestamp
            )
        case "size":
            return make_file_size_entry(
                run,
                invoc_id=invoc_id,
                task_id=task_id,
                file_name=draw(file_names),
                size=draw(byte_counts),
                direction=draw(directions),
                timestamp=timestamp,
            )
        case "file_time":
            return make_file_time_entry(
                run,
                invoc_id=invoc_id,
                task_id=task_id,
                file_name=draw(file_names),
                real_time=draw(real_times),
                direction=draw(directions),
                timestamp=timestamp,
            )
        case _:
            return make_entry(
                run, "invoc-stdout", "hello", invoc_id=invoc_id, task_id=task_id, task_name=f"task-{task_id}"
            )


@st.composite
def bound_entry_streams(draw: st.DrawFn, max_entries: int = 40) -> EntryStream:
    """Every run bound up front, then a shuffled mix of invocation entries."""
    bindings = tuple(
        make_workflow_entry(run, draw(st.sampled_from(WORKFLOWS)))
        for run in RUN_IDS
    )
    entries = tuple(draw(st.lists(invocation_entries(), max_size=max_entries)))
    return EntryStream(bindings=bindings, entries=entries)


@st.composite
def late_binding_streams(draw: st.DrawFn, max_entries: int = 30) -> EntryStream:
    """Invocation entries interleaved with their runs' wf-name entries.

    Bindings land at arbitrary positions, so some entries precede them.
    The combined order is carried in ``entries``; ``bindings`` is empty.
    """
    entries = list(draw(st.lists(invocation_entries(), max_size=max_entries)))
    for run in RUN_IDS:
        position = draw(st.integers(min_value=0, max_value=len(entries)))
        entries.insert(position, make_workflow_entry(run, draw(st.sampled_from(WORKFLOWS))))
    return EntryStream(bindings=(), entries=tuple(entries))
