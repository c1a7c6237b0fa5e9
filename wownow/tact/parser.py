"""
TACT response parser: ``|``-delimited, header-plus-rows text.

Wire format (versions endpoint)::

    Region!STRING:0|BuildConfig!HEX:16|CDNConfig!HEX:16|KeyRing!HEX:16|BuildId!DEC:4|VersionsName!String:0|ProductConfig!HEX:16
    ## seqn = 2118468
    us|47e9e06f...|74093d42...||53584|10.2.5.53584|53020d32...
    eu|47e9e06f...|74093d42...||53584|10.2.5.53584|53020d32...

Rules:
  - The first content line is the header.  A field may carry a type
    annotation after ``!``; only the name before it is used.
  - Column order is whatever the header declares.  Rows are read through a
    name → index mapping built once per response, never by position.
  - Blank lines and ``##`` lines (the seqn marker) are skipped anywhere.
  - Every other line is a data row and must have as many ``|`` segments as
    the header.  The first bad row fails the whole response.

Functions here are pure: text in, records (or an exception) out.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Optional

from wownow.models.version import RegionVersion, SummaryRecord
from wownow.tact.errors import EmptyResponse, MalformedHeader, MalformedRow

REGION_FIELD = "Region"
VERSION_FIELD = "VersionsName"
BUILD_FIELD = "BuildId"
VERSIONS_REQUIRED_FIELDS: tuple[str, ...] = (REGION_FIELD, VERSION_FIELD, BUILD_FIELD)

SUMMARY_REQUIRED_FIELDS: tuple[str, ...] = ("Product", "Seqn", "Flags")

_SENTINEL_PREFIX = "##"
_SEQN_RE = re.compile(r"^##\s*seqn\s*=\s*(\d+)\s*$")


@dataclass(frozen=True)
class _Row:
    index: int
    raw: str
    values: list[str]


@dataclass(frozen=True)
class _Table:
    columns: dict[str, int]
    rows: list[_Row]

    def value(self, row: _Row, field: str) -> str:
        return row.values[self.columns[field]]


def _lines(text: str) -> Iterator[str]:
    for line in text.split("\n"):
        yield line.rstrip("\r")


def _content_lines(text: str) -> Iterator[str]:
    """Yield lines that are neither blank nor ``##`` sentinels."""
    for line in _lines(text):
        if not line.strip() or line.startswith(_SENTINEL_PREFIX):
            continue
        yield line


def _read_table(text: str, product: str, required: Sequence[str]) -> _Table:
    lines = _content_lines(text)
    header = next(lines, None)
    if header is None:
        raise EmptyResponse(product)

    names = [segment.split("!", 1)[0].strip() for segment in header.split("|")]
    columns: dict[str, int] = {}
    for idx, name in enumerate(names):
        columns.setdefault(name, idx)
    for field in required:
        if field not in columns:
            raise MalformedHeader(product, field)

    rows: list[_Row] = []
    for row_index, line in enumerate(lines):
        values = line.split("|")
        if len(values) != len(names):
            raise MalformedRow(
                product,
                row_index,
                line,
                f"{len(values)} fields, header declares {len(names)}",
            )
        rows.append(_Row(index=row_index, raw=line, values=values))

    if not rows:
        raise EmptyResponse(product)
    return _Table(columns=columns, rows=rows)


def parse_versions(text: str, product: str) -> tuple[RegionVersion, ...]:
    """Parse one product's versions response.

    Args:
        text: Raw response body.
        product: Product id the body belongs to; used to tag errors.

    Returns:
        One ``RegionVersion`` per data row, in row order.  Values are taken
        verbatim from the ``Region``, ``VersionsName`` and ``BuildId``
        columns.

    Raises:
        MalformedHeader: A required field is missing from the header.
        MalformedRow: A row has the wrong segment count, an empty region, or
            repeats a region seen earlier in the response.
        EmptyResponse: No data rows follow the header.
    """
    table = _read_table(text, product, VERSIONS_REQUIRED_FIELDS)

    seen: set[str] = set()
    records: list[RegionVersion] = []
    for row in table.rows:
        region = table.value(row, REGION_FIELD)
        if not region:
            raise MalformedRow(product, row.index, row.raw, "empty region")
        if region in seen:
            raise MalformedRow(product, row.index, row.raw, f"duplicate region '{region}'")
        seen.add(region)
        records.append(
            RegionVersion(
                region=region,
                version=table.value(row, VERSION_FIELD),
                build=table.value(row, BUILD_FIELD),
            )
        )
    return tuple(records)


def parse_summary(text: str, product: str = "summary") -> tuple[SummaryRecord, ...]:
    """Parse the ``summary`` listing of every product the service knows.

    Raises:
        MalformedHeader: ``Product``, ``Seqn`` or ``Flags`` is missing.
        MalformedRow: Wrong segment count, empty product, or a ``Seqn`` value
            that is not a non-negative integer.
        EmptyResponse: No data rows follow the header.
    """
    table = _read_table(text, product, SUMMARY_REQUIRED_FIELDS)

    records: list[SummaryRecord] = []
    for row in table.rows:
        name = table.value(row, "Product")
        seqn = table.value(row, "Seqn")
        if not name:
            raise MalformedRow(product, row.index, row.raw, "empty product")
        if not (seqn.isascii() and seqn.isdigit()):
            raise MalformedRow(product, row.index, row.raw, f"non-numeric seqn '{seqn}'")
        records.append(
            SummaryRecord(product=name, seqn=int(seqn), flags=table.value(row, "Flags"))
        )
    return tuple(records)


def parse_seqn(text: str) -> Optional[int]:
    """Return the number on the first ``## seqn = N`` line, or ``None``."""
    for line in _lines(text):
        match = _SEQN_RE.match(line.strip())
        if match:
            return int(match.group(1))
    return None
