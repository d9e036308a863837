"""Concurrent ingestion tests.

Multiple reporting threads append to one store while readers query it.
"""

from concurrent.futures import ThreadPoolExecutor
from uuid import UUID

from provstore.contracts import FileDirection
from provstore.core.provenance import ProvenanceStore
from provstore.testing import make_file_size_entry, make_host_entry, make_workflow_entry


def test_same_invocation_from_many_threads_converges(store: ProvenanceStore, bound_run: UUID) -> None:
    entries = [
        make_file_size_entry(bound_run, invoc_id=1, task_id=1, file_name=f"f{i}", size=i, timestamp=i)
        for i in range(200)
    ]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(store.ingest, entries))

    assert sum(r.created_invocation for r in results) == 1
    assert len(store.all_entries()) == 1
    record = store.invocation(1)
    assert record is not None
    assert len(record.files(FileDirection.INPUT)) == 200


def test_binding_races_with_parked_entries(store: ProvenanceStore, run_id: UUID) -> None:
    entries = [make_host_entry(run_id, invoc_id=i, task_id=i % 3, host=f"n{i % 4}") for i in range(100)]
    binding = make_workflow_entry(run_id, "wf-A")

    with ThreadPoolExecutor(max_workers=8) as pool:
        futures = [pool.submit(store.ingest, e) for e in entries[:50]]
        futures.append(pool.submit(store.ingest, binding))
        futures.extend(pool.submit(store.ingest, e) for e in entries[50:])
        for future in futures:
            future.result()

    assert store.pending_count() == 0
    assert len(store.all_entries()) == 100
    assert store.host_names() == frozenset({"n0", "n1", "n2", "n3"})
    assert store.task_ids_for_workflow("wf-A") == frozenset({0, 1, 2})


def test_readers_see_consistent_snapshots(store: ProvenanceStore, bound_run: UUID) -> None:
    entries = [make_host_entry(bound_run, invoc_id=i, task_id=1, host="n", timestamp=i) for i in range(300)]

    def read() -> None:
        seen = 0
        for _ in range(50):
            records = store.entries_for_task(1)
            assert len(records) >= seen
            assert len({r.invoc_id for r in records}) == len(records)
            seen = len(records)

    with ThreadPoolExecutor(max_workers=4) as pool:
        readers = [pool.submit(read) for _ in range(2)]
        list(pool.map(store.ingest, entries))
        for reader in readers:
            reader.result()

    assert len(store.entries_for_task(1)) == 300
