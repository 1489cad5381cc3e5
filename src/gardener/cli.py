"""
Well Connected Gardener CLI

Enhance weeding lists by adding search results from other library OPACs.

Usage:
    well-connected-gardener [-v] file [file ...]
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from datetime import datetime, timezone

import typer
import logging

from gardener import __version__
from gardener.catalogs import DEFAULT_CATALOGS, YazClient
from gardener.config import DEFAULT_CLIENT_EXECUTABLE, DEFAULT_SETTLE_DELAY, GardenerConfig
from gardener.errors import ExternalQueryError
from gardener.pipeline.coordinator import RunController
from gardener.pipeline.worker import FileState

app = typer.Typer(
    add_completion=False,
    help="Enhance weeding lists by adding search results from other library OPACs.",
)

EXIT_CANCELLED = 130
TEXT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# Attributes every LogRecord carries; anything else came in through `extra=`.
_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", None, None).__dict__) | {
    "message", "asctime", "taskName",
}


def _extra_attrs(record: logging.LogRecord) -> dict[str, Any]:
    return {
        k: v
        for k, v in record.__dict__.items()
        if k not in _RESERVED_ATTRS and not k.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """JSON-lines formatter; `extra=` attributes become top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
            "thread": record.threadName,
        }
        for k, v in _extra_attrs(record).items():
            try:
                json.dumps(v)
                payload[k] = v
            except TypeError:
                payload[k] = repr(v)
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """Plain text formatter that appends `extra=` attributes as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extras = " ".join(f"{k}={v}" for k, v in _extra_attrs(record).items())
        return f"{line} {extras}" if extras else line


def setup_logging(level: str, *, json_logs: bool = False) -> logging.Logger:
    logger = logging.getLogger("gardener")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter() if json_logs else TextFormatter(TEXT_LOG_FORMAT))
    logger.handlers[:] = [handler]
    logger.propagate = False
    return logger


LOGGER = logging.getLogger("gardener")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"Well Connected Gardener - Version {__version__}")
        raise typer.Exit()


@app.command()
def augment_cmd(
    files: list[Path] | None = typer.Argument(
        None, help="Tab-separated weeding lists to augment", show_default=False
    ),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose output"),
    settle_delay: float = typer.Option(
        DEFAULT_SETTLE_DELAY, "--settle-delay", min=0.0, help="Seconds to wait after each catalog query"
    ),
    query_timeout: float | None = typer.Option(
        None, "--query-timeout", min=0.0, help="Give up on a single catalog query after this many seconds"
    ),
    client_executable: str = typer.Option(
        DEFAULT_CLIENT_EXECUTABLE, "--yaz-client", help="yaz-client executable name or path"
    ),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """
    Add catalog search results to each FILE, writing FILE_augmented beside it.

    Every record's ISBNs (020|a) are looked up in each catalog over Z39.50.
    Two columns per catalog are appended: whether it was found, and a search URL.
    Files are processed in parallel; Ctrl+C stops after the current query.

    Example:
        well-connected-gardener -v weeding-2019.tsv weeding-2020.tsv
    """
    global LOGGER
    LOGGER = setup_logging("DEBUG" if verbose else "INFO", json_logs=json_logs)

    if not files:
        typer.echo("Error: Please provide one file to process.", err=True)
        raise typer.Exit(code=1)

    config = GardenerConfig(
        verbose=verbose,
        settle_delay=settle_delay,
        query_timeout=query_timeout or None,
        client_executable=client_executable,
    )
    client = YazClient(executable=config.client_executable, timeout=config.query_timeout)

    # Check to see if we have yaz-client available to us.
    try:
        banner = client.version()
    except ExternalQueryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    LOGGER.debug("yaz_client_version", extra={"output": banner.strip()})

    controller = RunController(config, client, DEFAULT_CATALOGS)
    results = controller.run(files)

    # Final summary
    typer.echo(f"\n{'='*60}")
    typer.echo("Summary:")
    for result in results:
        hits = ", ".join(f"{k}={n}" for k, n in result.hits.items())
        line = f"  [{result.state.value}] {result.filename}: {result.records_written} record(s)"
        if hits:
            line += f" ({hits})"
        typer.echo(line)
        if result.output_path is not None and result.state is not FileState.ABORTED:
            typer.echo(f"      Output: {result.output_path}")
        if result.error:
            typer.echo(f"      Error: {result.error}", err=True)

    if any(r.state is FileState.ABORTED for r in results):
        raise typer.Exit(code=1)
    if controller.cancelled:
        raise typer.Exit(code=EXIT_CANCELLED)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
