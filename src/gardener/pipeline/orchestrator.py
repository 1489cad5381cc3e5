"""
Per-record catalog query loop.

Asks every configured catalog whether it holds any of a record's ISBN
candidates, trying candidates in order and dropping each catalog from the
loop as soon as it reports a hit.
"""

from __future__ import annotations

import logging
import threading
from typing import Sequence

from gardener.catalogs import CatalogClient, CatalogDescriptor, CatalogOutcome
from gardener.errors import Cancelled

logger = logging.getLogger(__name__)


def query_catalogs(
    isbns: Sequence[str],
    catalogs: Sequence[CatalogDescriptor],
    client: CatalogClient,
    *,
    cancel: threading.Event,
    settle_delay: float = 0.0,
) -> list[CatalogOutcome]:
    """
    Determine, for every catalog, whether any ISBN candidate is held there.

    For each candidate (in order), each catalog not yet found is queried.
    A hit marks that catalog found with the matching ISBN and no further
    queries go to it for this record. The loop ends early once every catalog
    is found. `settle_delay` seconds are waited out after each query (cut
    short if `cancel` is set meanwhile).

    Parameters:
        isbns: ISBN candidates, in query order
        catalogs: Catalogs to query, in output order
        client: Catalog client used for each (ISBN, catalog) query
        cancel: Shared cancellation token, checked before every query
        settle_delay: Pause after each external query

    Returns:
        One CatalogOutcome per catalog, in the order of `catalogs`

    Raises:
        Cancelled: If the token is set before a query is issued
        ExternalQueryError: If the client fails (propagated unchanged)

    Example:
        >>> outcomes = query_catalogs(["0131103628"], DEFAULT_CATALOGS, YazClient(), cancel=threading.Event())
        >>> [(o.catalog.key, o.found) for o in outcomes]
        [('uofo', True), ('uoft', False)]
    """
    matched: dict[str, str] = {}

    for isbn in isbns:
        if len(matched) == len(catalogs):
            break

        for catalog in catalogs:
            if catalog.key in matched:
                continue
            if cancel.is_set():
                raise Cancelled()

            hit = client.query(isbn, catalog)
            if hit:
                matched[catalog.key] = isbn
                logger.debug("catalog_hit", extra={"catalog": catalog.key, "isbn": isbn})

            if settle_delay > 0:
                # Returns early once cancelled; the check above then stops the loop.
                cancel.wait(settle_delay)

    return [
        CatalogOutcome(
            catalog=catalog,
            found=catalog.key in matched,
            matched_isbn=matched.get(catalog.key),
        )
        for catalog in catalogs
    ]
