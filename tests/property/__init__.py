# tests/property/__init__.py
"""Property-based tests for provstore.

Property-based testing validates invariants that must hold for ALL entry
streams, not just the orderings we think of.

Test modules:
- test_provenance_properties.py: query filters, host set growth, first-sight identity
- test_provenance_state_machine.py: stateful ingestion against a reference model
"""
