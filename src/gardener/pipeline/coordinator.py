"""
Run controller.

Fans out one worker thread per input file, all sharing one cancellation
token, and waits for every worker to finish. SIGINT sets the token; workers
notice it before their next record or their next catalog query.
"""

from __future__ import annotations

import logging
import signal
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from pathlib import Path
from typing import Sequence

from gardener.catalogs import DEFAULT_CATALOGS, CatalogClient, CatalogDescriptor
from gardener.config import GardenerConfig

from .worker import FileResult, FileState, process_file

logger = logging.getLogger(__name__)

WAIT_POLL_INTERVAL = 0.25  # seconds


class RunController:
    """
    Processes a batch of input files concurrently.

    Attributes:
        config: Run configuration shared by every worker
        client: Catalog client shared by every worker (must be thread-safe;
            YazClient is, as each query runs in its own process)
        catalogs: Catalogs to query, in output-column order
        cancel_event: Shared cancellation token, set at most once

    Example:
        >>> controller = RunController(GardenerConfig(), YazClient())
        >>> for result in controller.run(["a.tsv", "b.tsv"]):
        ...     print(result.filename, result.state.value)
    """

    def __init__(
        self,
        config: GardenerConfig,
        client: CatalogClient,
        catalogs: Sequence[CatalogDescriptor] = DEFAULT_CATALOGS,
        *,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.config = config
        self.client = client
        self.catalogs = tuple(catalogs)
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self._cancel_lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        """Ask every worker to stop. Only the first call has any effect."""
        with self._cancel_lock:
            if self.cancel_event.is_set():
                return
            self.cancel_event.set()
        logger.warning("Cancelling...")

    def _handle_interrupt(self, signum, frame) -> None:
        self.cancel()

    def _can_handle_signals(self) -> bool:
        # signal.signal only works from the main thread
        return threading.current_thread() is threading.main_thread()

    def _process(self, filename: str | Path) -> FileResult:
        return process_file(
            filename,
            config=self.config,
            client=self.client,
            catalogs=self.catalogs,
            cancel=self.cancel_event,
        )

    def run(self, filenames: Sequence[str | Path]) -> list[FileResult]:
        """
        Process every file on its own thread and wait for all of them.

        Parameters:
            filenames: Input files; one worker is started per entry

        Returns:
            One FileResult per filename, in input order
        """
        if not filenames:
            return []

        handle_signals = self._can_handle_signals()
        if handle_signals:
            previous_handler = signal.signal(signal.SIGINT, self._handle_interrupt)
        try:
            with ThreadPoolExecutor(
                max_workers=len(filenames), thread_name_prefix="gardener"
            ) as executor:
                futures = [executor.submit(self._process, f) for f in filenames]
                # Wake up periodically so a pending SIGINT handler gets to run.
                pending = set(futures)
                while pending:
                    _, pending = wait(pending, timeout=WAIT_POLL_INTERVAL)
        finally:
            if handle_signals:
                signal.signal(
                    signal.SIGINT,
                    previous_handler if previous_handler is not None else signal.default_int_handler,
                )

        results = [self._collect(f, fut) for f, fut in zip(filenames, futures)]

        if self.cancelled:
            logger.warning("Done.")
        return results

    def _collect(self, filename: str | Path, future: Future) -> FileResult:
        try:
            return future.result()
        except Exception as e:
            # process_file reports pipeline errors itself; this is anything else.
            logger.exception("file_crashed", extra={"file": str(filename)})
            return FileResult(filename=str(filename), state=FileState.ABORTED, error=repr(e))
