# src/provstore/cli.py
"""provstore Command Line Interface.

Replays a report log into a fresh ProvenanceStore and prints what the store
derived from it.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError

from provstore import __version__
from provstore.contracts.enums import IngestStatus
from provstore.contracts.records import FileRecord, InvocationRecord
from provstore.core.config import ProvstoreSettings, load_settings
from provstore.core.diagnostics import CollectingErrorSink
from provstore.core.provenance import ProvenanceStore
from provstore.core.report_log import read_report_log

__all__ = ["app"]

app = typer.Typer(
    name="provstore",
    help="provstore: replay and inspect workflow execution report logs.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"provstore version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file.

    Raises:
        typer.Exit: If an explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """provstore: replay and inspect workflow execution report logs."""
    from provstore.core.logging import configure_logging

    # Results go to stdout; keep routine log chatter off unless asked for
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "WARNING")
    ctx.obj = {"verbose": verbose, "json_logs": json_logs}

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


# =============================================================================
# Helpers
# =============================================================================


def _load_config(ctx: typer.Context, settings: Path | None) -> ProvstoreSettings:
    if settings is None:
        return ProvstoreSettings()
    try:
        config = load_settings(settings.expanduser())
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None

    # Command-line flags win over the settings file
    from provstore.core.logging import configure_logging

    state = ctx.obj or {}
    configure_logging(
        json_output=state.get("json_logs", False) or config.logging.json_output,
        level="DEBUG" if state.get("verbose", False) else config.logging.level,
    )
    return config


def _replay(
    ctx: typer.Context, log: Path, settings: Path | None
) -> tuple[ProvenanceStore, CollectingErrorSink, dict[IngestStatus, int]]:
    config = _load_config(ctx, settings)
    sink = CollectingErrorSink()
    store = ProvenanceStore.from_settings(config.ingestion, error_sink=sink)
    if not log.exists():
        typer.echo(f"Error: Report log not found: {log}", err=True)
        raise typer.Exit(1)
    statuses = store.ingest_many(read_report_log(log, sink))
    return store, sink, statuses


def _file_to_dict(record: FileRecord) -> dict[str, Any]:
    return asdict(record)


def _invocation_to_dict(record: InvocationRecord) -> dict[str, Any]:
    # asdict() cannot copy the read-only file mappings
    return {
        "invoc_id": record.invoc_id,
        "task_id": record.task_id,
        "timestamp": record.timestamp,
        "host_name": record.host_name,
        "real_time": record.real_time,
        "input_files": [_file_to_dict(f) for f in record.input_files.values()],
        "output_files": [_file_to_dict(f) for f in record.output_files.values()],
    }


# =============================================================================
# Commands
# =============================================================================

_LOG_ARGUMENT = typer.Argument(..., help="Report log (JSON lines, one report entry per line).")
_SETTINGS_OPTION = typer.Option(None, "--settings", "-s", help="Path to settings YAML file.")
_JSON_OPTION = typer.Option(False, "--json", "-j", help="Output as JSON.")


@app.command()
def replay(
    ctx: typer.Context,
    log: Path = _LOG_ARGUMENT,
    settings: Path | None = _SETTINGS_OPTION,
    json_output: bool = _JSON_OPTION,
    show_errors: bool = typer.Option(False, "--show-errors", "-e", help="List every ingestion error."),
    strict: bool = typer.Option(False, "--strict", help="Exit with status 1 if any entry failed."),
) -> None:
    """Replay a report log and summarize the resulting store."""
    store, sink, statuses = _replay(ctx, log, settings)
    summary = store.summary()
    error_counts = {kind.value: count for kind, count in sink.counts_by_kind().items()}

    if json_output:
        payload: dict[str, Any] = {
            "log": str(log),
            "entries": sum(statuses.values()),
            "statuses": {status.value: count for status, count in statuses.items()},
            "summary": asdict(summary),
            "workflows": sorted(store.workflow_names()),
            "hosts": sorted(store.host_names()),
            "errors": error_counts,
        }
        if show_errors:
            payload["error_details"] = [{"message": e.message, **e.to_log_fields()} for e in sink.errors]
        typer.echo(json.dumps(payload, indent=2))
    else:
        typer.echo(f"Replayed {sum(statuses.values())} entries from {log}")
        typer.echo(f"  runs: {summary.runs}  workflows: {summary.workflows}  tasks: {summary.tasks}")
        typer.echo(f"  invocations: {summary.invocations}  hosts: {summary.hosts}")
        typer.echo(f"  files: {summary.input_files} staged in / {summary.output_files} staged out")
        typer.echo(f"  pending: {summary.pending_entries}")
        if error_counts:
            detail = ", ".join(f"{kind}={count}" for kind, count in sorted(error_counts.items()))
            typer.echo(f"  errors: {len(sink)} ({detail})")
        else:
            typer.echo("  errors: 0")
        if show_errors:
            for error in sink.errors:
                typer.echo(f"    [{error.kind.value}] {error.message}")

    if strict and len(sink):
        raise typer.Exit(1)


@app.command()
def tasks(
    ctx: typer.Context,
    log: Path = _LOG_ARGUMENT,
    workflow: str = typer.Option(..., "--workflow", "-w", help="Workflow name."),
    settings: Path | None = _SETTINGS_OPTION,
    json_output: bool = _JSON_OPTION,
) -> None:
    """List the tasks of a workflow with their invocation counts."""
    store, _, _ = _replay(ctx, log, settings)
    task_ids = store.task_ids_for_workflow(workflow)
    if task_ids is None:
        known = ", ".join(sorted(store.workflow_names())) or "none"
        typer.echo(f"Error: Unknown workflow '{workflow}'. Known workflows: {known}", err=True)
        raise typer.Exit(1)

    rows = [
        {
            "task_id": task_id,
            "task_name": store.task_name(task_id),
            "invocations": len(store.entries_for_task(task_id)),
        }
        for task_id in sorted(task_ids)
    ]
    if json_output:
        typer.echo(json.dumps({"workflow": workflow, "tasks": rows}, indent=2))
        return
    typer.echo(f"Workflow {workflow}: {len(rows)} task(s)")
    for row in rows:
        typer.echo(f"  {row['task_id']:>8}  {row['task_name'] or '-':<24} {row['invocations']} invocation(s)")


@app.command()
def invocations(
    ctx: typer.Context,
    log: Path = _LOG_ARGUMENT,
    task: list[int] | None = typer.Option(None, "--task", "-t", help="Only these task ids (repeatable)."),
    since: int | None = typer.Option(None, "--since", help="Only invocations with timestamp strictly greater."),
    settings: Path | None = _SETTINGS_OPTION,
    json_output: bool = _JSON_OPTION,
) -> None:
    """Show the resource and file-staging profile of invocations."""
    store, _, _ = _replay(ctx, log, settings)
    if task:
        records = store.entries_for_tasks_since(task, since) if since is not None else store.entries_for_tasks(task)
    else:
        records = store.entries_since(since) if since is not None else store.all_entries()

    if json_output:
        typer.echo(json.dumps([_invocation_to_dict(r) for r in records], indent=2))
        return
    for record in records:
        typer.echo(
            f"invocation {record.invoc_id}  task {record.task_id} ({store.task_name(record.task_id) or '-'})"
            f"  t={record.timestamp}  host={record.host_name or '-'}  real_time={record.real_time}"
        )
        for label, files in (("in ", record.input_files), ("out", record.output_files)):
            for f in files.values():
                typer.echo(f"    {label} {f.file_name}  size={f.size}  real_time={f.real_time}")
    typer.echo(f"{len(records)} invocation(s)")
