"""
Exception taxonomy for the TACT client.

Hierarchy::

    TactError
    ├── FetchError            transport / timeout / non-2xx status
    ├── ResponseParseError    response text could not be decoded
    │   ├── MalformedHeader
    │   ├── MalformedRow
    │   └── EmptyResponse
    └── AggregationError      wraps the first failure of a snapshot run

Every error carries the product id it belongs to.  Only ``AggregationError``
leaves the aggregator; the CLI reports it and exits non-zero.
"""

from __future__ import annotations

from typing import Optional


class TactError(RuntimeError):
    """Base class for all errors raised by ``wownow.tact``.

    Attributes:
        product: Product id the error relates to (``"summary"`` for the
            product listing).
    """

    def __init__(self, product: str, message: str) -> None:
        self.product = product
        super().__init__(message)


class FetchError(TactError):
    """Raised when the version service could not be reached or answered badly.

    Attributes:
        product:     Product id being fetched.
        reason:      Human-readable cause description.
        status_code: HTTP status for non-2xx responses, else ``None``.
        timed_out:   ``True`` when the per-request timeout expired.
    """

    def __init__(
        self,
        product: str,
        reason: str,
        status_code: Optional[int] = None,
        timed_out: bool = False,
    ) -> None:
        self.reason = reason
        self.status_code = status_code
        self.timed_out = timed_out
        super().__init__(product, f"fetch failed for '{product}': {reason}")


class ResponseParseError(TactError):
    """Base class for errors decoding a response body."""


class MalformedHeader(ResponseParseError):
    """Raised when the header line lacks a required field.

    Attributes:
        field: Name of the missing field, e.g. ``"BuildId"``.
    """

    def __init__(self, product: str, field: str) -> None:
        self.field = field
        super().__init__(
            product, f"response for '{product}' has no '{field}' header field"
        )


class MalformedRow(ResponseParseError):
    """Raised for the first data row that cannot be accepted.

    Attributes:
        row_index: 0-based index among data rows (header, blank and seqn
            lines are not counted).
        raw:       The row text as received.
        detail:    What was wrong with the row.
    """

    def __init__(self, product: str, row_index: int, raw: str, detail: str) -> None:
        self.row_index = row_index
        self.raw = raw
        self.detail = detail
        super().__init__(
            product,
            f"response for '{product}' has malformed row {row_index} ({detail}): {raw!r}",
        )


class EmptyResponse(ResponseParseError):
    """Raised when a response has no data rows.

    Kept distinct from the malformed cases: an empty body usually means a
    transient service issue rather than a format change.
    """

    def __init__(self, product: str) -> None:
        super().__init__(product, f"response for '{product}' contains no data rows")


class AggregationError(TactError):
    """The single error a failed snapshot run raises.

    Attributes:
        product: Product whose fetch or parse failed.
        cause:   The underlying ``FetchError`` or ``ResponseParseError``.
    """

    def __init__(self, product: str, cause: TactError) -> None:
        self.cause = cause
        super().__init__(product, f"error getting '{product}' versions: {cause}")

    @property
    def kind(self) -> str:
        """``"fetch"`` for transport failures, ``"parse"`` for format failures."""
        return "fetch" if isinstance(self.cause, FetchError) else "parse"
