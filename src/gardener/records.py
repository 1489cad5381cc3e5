"""
Tabular record model and ISBN extraction.

A weeding list is a tab-separated export whose first row names the columns.
Column names are matched case-insensitively (and trimmed) so that exports from
different ILS report templates line up with the configured column names.
"""

from __future__ import annotations

import csv
from dataclasses import dataclass, field
from urllib.parse import quote_plus

from .errors import ParseError

# Separator between repeated subfield instances, e.g. "0-13-110362-8 (pbk.)";"9780131103627"
SUBFIELD_DELIMITER = '";"'


class WeedingListDialect(csv.Dialect):
    """Tab-separated input, split on tabs only.

    Quotes are left in the fields by the csv module and resolved afterwards
    by `decode_row`, which is lenient about stray quotes inside quoted fields
    (repeated subfields are exported as "a";"b").
    """

    delimiter = "\t"
    quoting = csv.QUOTE_NONE
    quotechar = None
    escapechar = None
    doublequote = False
    skipinitialspace = False
    lineterminator = "\n"
    strict = False


class AugmentedListDialect(csv.excel_tab):
    """Tab-separated output; fields holding quotes or tabs are quoted, quotes doubled."""

    lineterminator = "\n"


def unquote_field(value: str) -> str:
    '''
    Resolve the quoting of one raw tab-separated field, leniently.

    A field that starts with a quote is a quoted field: the opening quote and
    the quote that ends the field are dropped and doubled quotes collapse to
    one. Any other quote inside it is kept literally. Unquoted fields are
    returned as is.

    Example:
        >>> unquote_field('"0-13-110362-8 (pbk.)";"9780131103627"')
        '0-13-110362-8 (pbk.)";"9780131103627'
        >>> unquote_field('"He said ""hi"""')
        'He said "hi"'
    '''
    if not value.startswith('"'):
        return value

    out: list[str] = []
    rest = value[1:]
    while True:
        i = rest.find('"')
        if i < 0:
            # Unterminated quoted field
            out.append(rest)
            break
        out.append(rest[:i])
        rest = rest[i + 1:]
        if not rest:
            break
        out.append('"')
        if rest.startswith('"'):
            rest = rest[1:]
    return "".join(out)


def decode_row(row: list[str]) -> list[str]:
    return [unquote_field(v) for v in row]


def normalize_label(label: str) -> str:
    return label.strip().lower()


@dataclass(frozen=True)
class Header:
    """
    Column names of one input file.

    Attributes:
        columns: Names exactly as they appear in the file (used for output)
        labels: Lower-cased, trimmed names (used for lookup)
    """

    columns: tuple[str, ...]
    labels: tuple[str, ...]

    @classmethod
    def from_row(cls, row: list[str]) -> Header:
        return cls(
            columns=tuple(row),
            labels=tuple(normalize_label(c) for c in row),
        )

    def __len__(self) -> int:
        return len(self.columns)


@dataclass
class Record:
    """
    One data row of an input file.

    `fields` is an independent copy of the decoded row; `values` maps each
    lower-cased header label to the field at the same position.
    """

    fields: list[str]
    values: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_row(cls, header: Header, row: list[str], *, line: int | None = None) -> Record:
        """
        Build a record from a decoded row.

        Parameters:
            header: Header of the file the row belongs to
            row: Decoded field values
            line: Optional line number, used in the error message

        Returns:
            Record with indexed and name-keyed access

        Raises:
            ParseError: If the row's field count differs from the header's
        """
        if len(row) != len(header):
            where = f"line {line}: " if line is not None else ""
            raise ParseError(
                f"{where}wrong number of fields (expected {len(header)}, got {len(row)})"
            )
        fields = list(row)
        return cls(fields=fields, values=dict(zip(header.labels, fields)))

    def __getitem__(self, index: int) -> str:
        return self.fields[index]

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, label: str, default: str = "") -> str:
        """Look up a field by column name (case-insensitive, trimmed)."""
        return self.values.get(normalize_label(label), default)


def extract_isbns(raw: str) -> list[str]:
    """
    Pull ISBN candidates out of a (possibly repeated) 020$a subfield value.

    Only the token before the first space of each instance is kept, so
    qualifiers like "(pbk.)" are dropped. Candidates are not validated: any
    non-empty token is returned, in the order it appears.

    Example:
        >>> extract_isbns('"0-13-110362-8 (pbk.)";"9780131103627"')
        ['0-13-110362-8', '9780131103627']
    """
    isbns: list[str] = []
    for part in raw.strip().split(SUBFIELD_DELIMITER):
        isbn = part.split(" ", 1)[0].strip('":.')
        if isbn:
            isbns.append(isbn)
    return isbns


def url_ready_title(title: str) -> str:
    """Query-escape the title proper (the text before any "/ statement of responsibility")."""
    # Undecodable input bytes are kept as surrogates; escape them as the raw bytes.
    return quote_plus(title.split("/", 1)[0].strip(), errors="surrogateescape")
