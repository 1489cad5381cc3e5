"""
Exception taxonomy for the augmentation pipeline.

Every error is local to the file being processed: the worker that raises it
stops, logs, and reports the failure in its result. Sibling workers keep going.
"""

from __future__ import annotations


class GardenerError(Exception):
    """Base class for all pipeline errors."""


class PathResolutionError(GardenerError):
    """The input filename could not be turned into an absolute path."""


class FileOpenError(GardenerError):
    """The input file or its augmented output file could not be opened."""


class ParseError(GardenerError):
    """Malformed tabular syntax, or a row whose width differs from the header."""


class ExternalQueryError(GardenerError):
    """The external catalog client failed to launch, run, or report back."""


class WriteError(GardenerError):
    """Writing or flushing the augmented output failed."""


class Cancelled(Exception):
    """Raised when the shared cancellation token is observed mid-record."""
