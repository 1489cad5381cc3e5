"""
Catalog descriptors and the Z39.50 client adapter.

Basic usage:
    >>> from gardener.catalogs import DEFAULT_CATALOGS, YazClient
    >>>
    >>> client = YazClient()
    >>> for catalog in DEFAULT_CATALOGS:
    ...     print(catalog.name, client.query("0131103628", catalog))
"""

from .models import CatalogDescriptor, CatalogOutcome
from .registry import DEFAULT_CATALOGS, UOFO_CATALOG, UOFT_CATALOG
from .yaz import CatalogClient, YazClient, parse_hit_count

__all__ = [
    # Models
    "CatalogDescriptor",
    "CatalogOutcome",
    # Registry
    "DEFAULT_CATALOGS",
    "UOFO_CATALOG",
    "UOFT_CATALOG",
    # Client
    "CatalogClient",
    "YazClient",
    "parse_hit_count",
]
