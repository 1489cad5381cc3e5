"""
Pydantic models for catalogs and per-record query outcomes.

A catalog is described entirely by data: where to connect, which yaz-client
script finds an ISBN there, and how to link into its public search interface.
One generic query loop consumes these descriptors.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, field_validator


class CatalogDescriptor(BaseModel):
    """
    Static description of one remote library catalog.

    Attributes:
        key: Short identifier (used in logs and hit counters)
        name: Human-readable catalog name
        target: Z39.50 target (host:port[/database])
        query_template: yaz-client command script; "{isbn}" is substituted
        isbn_url_template: Public search URL for a matched ISBN ("{isbn}")
        title_url_template: Public title-search URL used as fallback ("{title}")
        found_column: Output column holding the found flag
        url_column: Output column holding the search URL
    """

    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    target: str
    query_template: str
    isbn_url_template: str
    title_url_template: str
    found_column: str
    url_column: str

    @field_validator("query_template", "isbn_url_template")
    @classmethod
    def _requires_isbn_placeholder(cls, v: str) -> str:
        if "{isbn}" not in v:
            raise ValueError("template must contain an {isbn} placeholder")
        return v

    @field_validator("title_url_template")
    @classmethod
    def _requires_title_placeholder(cls, v: str) -> str:
        if "{title}" not in v:
            raise ValueError("template must contain a {title} placeholder")
        return v

    def query_script(self, isbn: str) -> str:
        """Render the yaz-client command script for one ISBN."""
        return self.query_template.format(target=self.target, isbn=isbn)

    def isbn_url(self, isbn: str) -> str:
        return self.isbn_url_template.format(isbn=isbn)

    def title_url(self, escaped_title: str) -> str:
        return self.title_url_template.format(title=escaped_title)


@dataclass(frozen=True)
class CatalogOutcome:
    """
    Result of querying one catalog with all ISBN candidates of one record.

    Attributes:
        catalog: The catalog that was queried
        found: Whether any candidate produced a hit
        matched_isbn: The candidate that produced the hit (None unless found)
    """

    catalog: CatalogDescriptor
    found: bool = False
    matched_isbn: str | None = None
