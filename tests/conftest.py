"""Shared test doubles and fixtures."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from gardener.catalogs import CatalogDescriptor
from gardener.errors import ExternalQueryError
from gardener.records import decode_row


class FakeCatalogClient:
    """
    Deterministic stand-in for YazClient.

    Attributes:
        hits: (isbn, catalog key) pairs that report a hit
        fail_on: ISBNs whose queries raise ExternalQueryError
        on_query: Optional callback run at the start of every query
        calls: (isbn, catalog key) pairs in the order they were queried
    """

    name = "fake"

    def __init__(self, hits=(), fail_on=(), on_query=None):
        self.hits = set(hits)
        self.fail_on = set(fail_on)
        self.on_query = on_query
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def query(self, isbn: str, catalog: CatalogDescriptor) -> bool:
        with self._lock:
            self.calls.append((isbn, catalog.key))
        if self.on_query is not None:
            self.on_query(isbn, catalog)
        if isbn in self.fail_on:
            raise ExternalQueryError(f"simulated failure for {isbn}")
        return (isbn, catalog.key) in self.hits


@pytest.fixture
def make_client():
    """Factory for FakeCatalogClient instances."""
    return FakeCatalogClient


@pytest.fixture
def write_tsv(tmp_path: Path):
    """Write rows (lists of fields) as a tab-separated file under tmp_path."""

    def _write(name: str, rows: list[list[str]]) -> Path:
        path = tmp_path / name
        path.write_text("".join("\t".join(row) + "\n" for row in rows), encoding="utf-8")
        return path

    return _write


def read_tsv(path: Path) -> list[list[str]]:
    """Read an augmented file back into decoded fields."""
    text = path.read_text(encoding="utf-8", errors="surrogateescape")
    return [decode_row(line.split("\t")) for line in text.splitlines()]


@pytest.fixture
def read_output():
    return read_tsv
