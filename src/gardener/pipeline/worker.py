"""
Single file processing worker.

Core processing function for augmenting one weeding list. Called once per
input file by the run controller, each call on its own thread.
"""

from __future__ import annotations

import csv
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import IO, TYPE_CHECKING, Sequence

from gardener.catalogs import DEFAULT_CATALOGS, CatalogClient, CatalogDescriptor
from gardener.config import GardenerConfig
from gardener.errors import (
    Cancelled,
    FileOpenError,
    GardenerError,
    ParseError,
    PathResolutionError,
    WriteError,
)
from gardener.records import (
    AugmentedListDialect,
    Header,
    Record,
    WeedingListDialect,
    decode_row,
    extract_isbns,
)

from .augment import augment_header, augment_row
from .orchestrator import query_catalogs
from .output import augmented_output_path

if TYPE_CHECKING:
    from _csv import _reader, _writer

logger = logging.getLogger(__name__)


class FileState(str, Enum):
    """Terminal states of a file worker."""

    COMPLETED = "completed"
    ABORTED = "aborted"
    CANCELLED = "cancelled"


@dataclass
class FileResult:
    """
    Result of processing a single input file.

    Attributes:
        filename: Filename as given on the command line
        input_path: Resolved input path (None if resolution failed)
        output_path: Augmented output path (None if never determined)
        state: Terminal state reached by the worker
        records_written: Number of augmented data rows written
        hits: Per-catalog count of records found there, keyed by catalog key
        error: Error message when the worker aborted
        elapsed_seconds: Total processing time
    """

    filename: str
    input_path: Path | None = None
    output_path: Path | None = None
    state: FileState = FileState.COMPLETED
    records_written: int = 0
    hits: dict[str, int] = field(default_factory=dict)
    error: str | None = None
    elapsed_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.state is FileState.COMPLETED


def _write_row(writer: _writer, out: IO[str], row: list[str]) -> None:
    try:
        writer.writerow(row)
        out.flush()
    except (OSError, UnicodeError, csv.Error) as e:
        raise WriteError(f"unable to write augmented row: {e}") from e


def _stream_records(
    reader: _reader,
    writer: _writer,
    out: IO[str],
    result: FileResult,
    *,
    config: GardenerConfig,
    client: CatalogClient,
    catalogs: Sequence[CatalogDescriptor],
    cancel: threading.Event,
) -> FileState:
    header: Header | None = None

    while True:
        if cancel.is_set():
            return FileState.CANCELLED

        try:
            row = decode_row(next(reader))
        except StopIteration:
            return FileState.COMPLETED
        except csv.Error as e:
            raise ParseError(f"line {reader.line_num}: {e}") from e

        if not row:
            # Blank line
            continue

        if header is None:
            header = Header.from_row(row)
            _write_row(writer, out, augment_header(header, catalogs))
            continue

        record = Record.from_row(header, row, line=reader.line_num)
        if config.verbose:
            logger.debug("record", extra={"file": result.filename, "values": record.values})

        isbns = extract_isbns(record.get(config.isbn_column))
        try:
            outcomes = query_catalogs(
                isbns,
                catalogs,
                client,
                cancel=cancel,
                settle_delay=config.settle_delay,
            )
        except Cancelled:
            return FileState.CANCELLED

        _write_row(writer, out, augment_row(record, outcomes, title=record.get(config.title_column)))
        result.records_written += 1
        for outcome in outcomes:
            if outcome.found:
                result.hits[outcome.catalog.key] += 1

        logger.debug(
            "record_processed",
            extra={
                "file": result.filename,
                "line": reader.line_num,
                "isbns": isbns,
                "found": [o.catalog.key for o in outcomes if o.found],
            },
        )


def process_file(
    filename: str | Path,
    *,
    config: GardenerConfig,
    client: CatalogClient,
    catalogs: Sequence[CatalogDescriptor] = DEFAULT_CATALOGS,
    cancel: threading.Event | None = None,
) -> FileResult:
    """
    Augment one weeding list: read, query catalogs per record, write.

    Handles all aspects of processing one file:
    - Resolving the input path and opening the input/output pair
    - Writing the augmented header
    - Querying catalogs for each record and writing augmented rows in order
    - Stopping between records (or between queries) once `cancel` is set

    Errors never escape: they are logged and reported through the result,
    so one failing file cannot disturb the workers of other files. Rows
    written before a failure are kept.

    Parameters:
        filename: Path to the tab-separated input file
        config: Run configuration
        client: Catalog client used for all queries of this file
        catalogs: Catalogs to query, in output-column order
        cancel: Shared cancellation token (a fresh one if omitted)

    Returns:
        FileResult with terminal state and statistics

    Example:
        >>> result = process_file("weeding.tsv", config=GardenerConfig(), client=YazClient())
        >>> print(f"{result.state.value}: {result.records_written} rows -> {result.output_path}")
    """
    start_time = time.perf_counter()
    cancel = cancel if cancel is not None else threading.Event()
    result = FileResult(filename=str(filename), hits={c.key: 0 for c in catalogs})
    log_extra = {"file": result.filename}

    logger.info("file_started", extra=log_extra)

    try:
        try:
            input_path = Path(filename).expanduser().resolve()
        except (OSError, RuntimeError) as e:
            raise PathResolutionError(f"unable to get absolute path of {filename}: {e}") from e
        result.input_path = input_path
        result.output_path = augmented_output_path(input_path, config.output_suffix)

        try:
            src = input_path.open(
                "r", encoding=config.encoding, errors="surrogateescape", newline=""
            )
        except OSError as e:
            raise FileOpenError(f"unable to open {input_path} for reading: {e}") from e

        with src:
            try:
                dst = result.output_path.open(
                    "w", encoding=config.encoding, errors="surrogateescape", newline=""
                )
            except OSError as e:
                raise FileOpenError(
                    f"unable to open {result.output_path} for writing: {e}"
                ) from e

            with dst:
                reader = csv.reader(src, dialect=WeedingListDialect)
                writer = csv.writer(dst, dialect=AugmentedListDialect)
                result.state = _stream_records(
                    reader,
                    writer,
                    dst,
                    result,
                    config=config,
                    client=client,
                    catalogs=catalogs,
                    cancel=cancel,
                )

    except GardenerError as e:
        result.state = FileState.ABORTED
        result.error = str(e)
        logger.error(
            "file_aborted",
            extra={**log_extra, "error": str(e), "error_type": type(e).__name__},
        )

    result.elapsed_seconds = time.perf_counter() - start_time

    if result.state is FileState.CANCELLED:
        logger.info("file_cancelled", extra={**log_extra, "records": result.records_written})
    elif result.state is FileState.COMPLETED:
        logger.info(
            "file_completed",
            extra={
                **log_extra,
                "output": str(result.output_path),
                "records": result.records_written,
                "hits": dict(result.hits),
                "elapsed_s": round(result.elapsed_seconds, 3),
            },
        )

    return result
