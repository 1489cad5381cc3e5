from __future__ import annotations

import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass, field
from typing import Protocol

from gardener.config import DEFAULT_CLIENT_EXECUTABLE
from gardener.errors import ExternalQueryError

from .models import CatalogDescriptor

HIT_COUNT_MARKER = "Number of hits:"
COMMAND_FILE_PREFIX = "well-connected-gardener-yaz-command."


class CatalogClient(Protocol):
    """Minimal interface for answering "does this catalog hold this ISBN?"."""

    name: str

    def query(self, isbn: str, catalog: CatalogDescriptor) -> bool:
        ...


def parse_hit_count(output: str) -> int | None:
    """
    Return the largest hit count reported in yaz-client output.

    yaz-client prints e.g. "Number of hits: 2, setno 1" after a find.
    Lines that start with the marker but don't parse are ignored.
    Returns None when no parsable hit line is present.
    """
    best: int | None = None
    for line in output.splitlines():
        if not line.startswith(HIT_COUNT_MARKER):
            continue
        tokens = line[len(HIT_COUNT_MARKER):].split()
        if not tokens:
            continue
        try:
            count = int(tokens[0].rstrip(","))
        except ValueError:
            continue
        best = count if best is None else max(best, count)
    return best


@dataclass
class YazClient:
    """yaz-client backed catalog lookup.

    Each query writes a short command script to a temporary file and runs:
        yaz-client -f <script>

    The session is opened, searched and closed within that one process, so
    queries share no state.
    """

    name: str = "yaz-client"
    executable: str = DEFAULT_CLIENT_EXECUTABLE
    timeout: float | None = None
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger(__name__))

    def version(self) -> str:
        """Run `yaz-client -V` and return its output.

        Raises:
            ExternalQueryError: If the executable is missing or fails
        """
        proc = self._run([self.executable, "-V"])
        return proc.stdout

    def query(self, isbn: str, catalog: CatalogDescriptor) -> bool:
        """Search `catalog` for `isbn`; True when it reports at least one hit."""
        script_path = self._write_command_file(catalog.query_script(isbn))
        try:
            proc = self._run([self.executable, "-f", script_path])
        finally:
            try:
                os.remove(script_path)
            except OSError:
                self.logger.warning("yaz_command_file_not_removed", extra={"path": script_path})

        count = parse_hit_count(proc.stdout)
        self.logger.debug(
            "catalog_query",
            extra={"catalog": catalog.key, "isbn": isbn, "hits": count},
        )
        return count is not None and count > 0

    def _write_command_file(self, script: str) -> str:
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                prefix=COMMAND_FILE_PREFIX,
                suffix=".txt",
                encoding="utf-8",
                delete=False,
            ) as f:
                f.write(script)
                f.flush()
                os.fsync(f.fileno())
        except OSError as e:
            raise ExternalQueryError(f"unable to write temporary command file: {e}") from e

        self.logger.debug("yaz_command_file", extra={"path": f.name})
        return f.name

    def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                errors="replace",
                check=True,
                timeout=self.timeout,
            )
        except OSError as e:
            raise ExternalQueryError(
                f"unable to execute {self.executable}: {e}. "
                f"Install YAZ and ensure `{self.executable}` is on your PATH."
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ExternalQueryError(f"{self.executable} timed out after {e.timeout}s") from e
        except subprocess.CalledProcessError as e:
            raise ExternalQueryError(
                f"{self.executable} exited with status {e.returncode}:\n{e.stderr or e.stdout}"
            ) from e
