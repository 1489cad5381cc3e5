"""
Catalogs queried by default, in output-column order.
"""

from __future__ import annotations

from .models import CatalogDescriptor

UOFO_CATALOG = CatalogDescriptor(
    key="uofo",
    name="University of Ottawa Library",
    target="orbis.uottawa.ca:210/INNOPAC",
    query_template='open {target}\nfind @attr 1=7 "{isbn}"\nclose\nquit\n',
    isbn_url_template="https://orbis.uottawa.ca/search/?searchtype=i&SORT=D&searcharg={isbn}",
    title_url_template="https://orbis.uottawa.ca/search/?searchtype=t&SORT=D&searcharg={title}",
    found_column="FOUND IN UOFO CATALOGUE",
    url_column="UOFO CATALOGUE SEARCH",
)

UOFT_CATALOG = CatalogDescriptor(
    key="uoft",
    name="University of Toronto Libraries",
    target="sirsi.library.utoronto.ca:2200",
    query_template='open {target}\nfind @attr 1=7 "{isbn}"\nquit\n',
    isbn_url_template="https://onesearch.library.utoronto.ca/onesearch/{isbn}//",
    title_url_template="https://onesearch.library.utoronto.ca/onesearch/{title}//title",
    found_column="FOUND IN UOFT CATALOGUE",
    url_column="UOFT CATALOGUE SEARCH",
)

DEFAULT_CATALOGS: tuple[CatalogDescriptor, ...] = (UOFO_CATALOG, UOFT_CATALOG)
