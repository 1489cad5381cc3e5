"""
Output path resolution.
"""

from __future__ import annotations

from pathlib import Path

from gardener.config import DEFAULT_OUTPUT_SUFFIX


def augmented_output_path(input_path: Path, suffix: str = DEFAULT_OUTPUT_SUFFIX) -> Path:
    """
    Sibling path for the augmented copy of `input_path`.

    The suffix goes between the stem and the final extension, so the output
    lands next to the input and keeps its file type.

    Example:
        >>> augmented_output_path(Path("/data/weeding.tsv"))
        PosixPath('/data/weeding_augmented.tsv')
        >>> augmented_output_path(Path("/data/weeding"))
        PosixPath('/data/weeding_augmented')
    """
    return input_path.with_name(f"{input_path.stem}{suffix}{input_path.suffix}")
