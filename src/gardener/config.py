"""
Run configuration.

A single immutable value built once by the CLI and handed to every component.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_SETTLE_DELAY = 0.5  # seconds between external queries
DEFAULT_ISBN_COLUMN = "020|a"
DEFAULT_TITLE_COLUMN = "title"
DEFAULT_OUTPUT_SUFFIX = "_augmented"
DEFAULT_CLIENT_EXECUTABLE = "yaz-client"


class GardenerConfig(BaseModel):
    """
    Settings shared by the run controller, file workers and catalog client.

    Attributes:
        verbose: Emit per-record and per-query diagnostics
        settle_delay: Pause after every external query (rate-limiting courtesy)
        query_timeout: Optional wall-clock limit for one external query
        isbn_column: Header name (case-insensitive) holding the ISBN subfield
        title_column: Header name (case-insensitive) holding the title
        output_suffix: Inserted before the input extension to name the output
        encoding: Text encoding of input and output files
        client_executable: Name or path of the yaz-client executable
    """

    model_config = ConfigDict(frozen=True)

    verbose: bool = False
    settle_delay: float = Field(default=DEFAULT_SETTLE_DELAY, ge=0)
    query_timeout: float | None = Field(default=None, gt=0)
    isbn_column: str = DEFAULT_ISBN_COLUMN
    title_column: str = DEFAULT_TITLE_COLUMN
    output_suffix: str = Field(default=DEFAULT_OUTPUT_SUFFIX, min_length=1)
    encoding: str = "utf-8"
    client_executable: str = DEFAULT_CLIENT_EXECUTABLE
