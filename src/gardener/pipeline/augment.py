"""
Augmented header and row construction.
"""

from __future__ import annotations

from typing import Sequence

from gardener.catalogs import CatalogDescriptor, CatalogOutcome
from gardener.records import Header, Record, url_ready_title


def augment_header(header: Header, catalogs: Sequence[CatalogDescriptor]) -> list[str]:
    """Original column names followed by a found/URL column pair per catalog."""
    row = list(header.columns)
    for catalog in catalogs:
        row.append(catalog.found_column)
        row.append(catalog.url_column)
    return row


def augment_row(record: Record, outcomes: Sequence[CatalogOutcome], *, title: str) -> list[str]:
    """
    Original fields followed by a found flag and search URL per catalog.

    Found catalogs link straight to the matched ISBN; the others fall back to
    a title search built from `title`.
    """
    row = list(record.fields)
    for outcome in outcomes:
        catalog = outcome.catalog
        row.append("true" if outcome.found else "false")
        if outcome.found and outcome.matched_isbn:
            row.append(catalog.isbn_url(outcome.matched_isbn))
        else:
            row.append(catalog.title_url(url_ready_title(title)))
    return row
