"""
provstore: In-memory provenance store for scientific-workflow execution logs.

Ingests the report entries emitted while workflow tasks run on distributed
workers and answers which hosts ran what, which tasks belong to which
workflow, and the timing/file-staging profile of every task invocation.
"""

__version__ = "0.1.0"
