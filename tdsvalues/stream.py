"""Result streams built from the tokens a server sends in reply to a query."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from .sql_value import ColumnData, ColumnKind
from .temporal import ProtocolError


class ServerError(Exception):
    """An error reported by the server in an error token."""

    def __init__(self, error: Any) -> None:
        super().__init__(str(error))
        self.error = error


class RoutingError(Exception):
    """The server asked the client to reconnect to another address.

    A routing environment change token carries an instance of this class
    as its payload.
    """

    def __init__(self, host: str, port: int) -> None:
        super().__init__(f"server requested routing to {host}:{port}")
        self.host = host
        self.port = port

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RoutingError):
            return NotImplemented
        return (self.host, self.port) == (other.host, other.port)

    def __hash__(self) -> int:
        return hash((self.host, self.port))


class TokenKind(enum.Enum):
    """The kinds of token a server response is made of."""

    NEW_RESULTSET = "new_resultset"
    ROW = "row"
    DONE = "done"
    DONE_IN_PROC = "done_in_proc"
    DONE_PROC = "done_proc"
    RETURN_STATUS = "return_status"
    RETURN_VALUE = "return_value"
    ORDER = "order"
    ENV_CHANGE = "env_change"
    INFO = "info"
    LOGIN_ACK = "login_ack"
    SSPI = "sspi"
    FEATURE_EXT_ACK = "feature_ext_ack"
    ERROR = "error"


@dataclass(frozen=True)
class ReceivedToken:
    """A decoded token.

    ``NEW_RESULTSET`` carries a sequence of ``Column`` and ``ROW`` a sequence
    of ``ColumnData``; the other kinds carry whatever their decoder produced.
    """

    kind: TokenKind
    payload: Any = None


@dataclass(frozen=True)
class Column:
    """Name and type of a result column."""

    name: str
    column_type: ColumnKind | None = None


@dataclass(frozen=True)
class Row:
    """One row of a result set."""

    columns: tuple[Column, ...]
    data: tuple[ColumnData, ...]
    result_index: int = 0

    def get(self, key: int | str) -> Any:
        """The value at a column index or of the first column with a name.

        Returns ``None`` for NULL and for a column that does not exist.
        """
        if isinstance(key, str):
            index = next(
                (i for i, column in enumerate(self.columns) if column.name == key),
                None,
            )
        elif 0 <= key < len(self.data):
            index = key
        else:
            index = None
        if index is None:
            return None
        return self.data[index].value

    def __iter__(self) -> Iterator[ColumnData]:
        return iter(self.data)

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ResultMetadata:
    """Describes the rows that follow it in a stream."""

    columns: tuple[Column, ...]
    result_index: int


@dataclass(frozen=True)
class QueryItem:
    """Either a row or the metadata of the rows that follow."""

    row: Row | None = None
    metadata: ResultMetadata | None = None

    def __post_init__(self) -> None:
        if (self.row is None) == (self.metadata is None):
            raise ValueError("a query item holds exactly one of a row or metadata")

    def as_row(self) -> Row | None:
        """The row, if this item is one."""
        return self.row

    def as_metadata(self) -> ResultMetadata | None:
        """The metadata, if this item is metadata."""
        return self.metadata


def _surface_errors(tokens: Iterable[ReceivedToken]) -> Iterator[ReceivedToken]:
    """Yield tokens; at the end, raise the first server error that was seen."""
    first_error: Any = None
    seen_error = False
    for token in tokens:
        if token.kind is TokenKind.ERROR and not seen_error:
            first_error = token.payload
            seen_error = True
        yield token
    if seen_error:
        raise ServerError(first_error)


_NOTHING = object()


class QueryStream(Iterator[QueryItem]):
    """Iterates over the result sets of a query as metadata and row items.

    Every result set starts with a metadata item describing the rows after
    it; another metadata item starts the next result set.
    """

    def __init__(self, tokens: Iterable[ReceivedToken]) -> None:
        self._tokens = _surface_errors(tokens)
        self._peeked: Any = _NOTHING
        self._columns: tuple[Column, ...] | None = None
        self._result_index: int | None = None

    def _peek(self) -> ReceivedToken | None:
        if self._peeked is _NOTHING:
            self._peeked = next(self._tokens, None)
        return self._peeked

    def _advance(self) -> ReceivedToken | None:
        token = self._peek()
        self._peeked = _NOTHING
        return token

    def forward_to_metadata(self) -> None:
        """Skip tokens until the next result metadata or the end."""
        while True:
            token = self._peek()
            if token is None or token.kind is TokenKind.NEW_RESULTSET:
                return
            self._advance()

    def columns(self) -> tuple[Column, ...] | None:
        """Columns of the current result set, or of the next one if it comes next."""
        while True:
            token = self._peek()
            if token is None or token.kind is TokenKind.ROW:
                break
            if token.kind is TokenKind.NEW_RESULTSET:
                self._columns = tuple(token.payload)
                break
            self._advance()
        return self._columns

    def __iter__(self) -> QueryStream:
        return self

    def __next__(self) -> QueryItem:
        while True:
            token = self._advance()
            if token is None:
                raise StopIteration
            if token.kind is TokenKind.NEW_RESULTSET:
                columns = tuple(token.payload)
                self._columns = columns
                self._result_index = (
                    0 if self._result_index is None else self._result_index + 1
                )
                return QueryItem(metadata=ResultMetadata(columns, self._result_index))
            if token.kind is TokenKind.ROW:
                if self._columns is None or self._result_index is None:
                    raise ProtocolError("row received before result metadata")
                row = Row(self._columns, tuple(token.payload), self._result_index)
                return QueryItem(row=row)

    def into_results(self) -> list[list[Row]]:
        """Collect the rows of every result set, in order."""
        results: list[list[Row]] = []
        current: list[Row] | None = None
        for item in self:
            if item.row is not None:
                if current is None:
                    current = [item.row]
                else:
                    current.append(item.row)
            elif current is None:
                current = []
            else:
                results.append(current)
                current = None
        if current is not None:
            results.append(current)
        return results

    def into_first_result(self) -> list[Row]:
        """Collect the rows of the first result set, dropping the rest."""
        results = self.into_results()
        return results[0] if results else []

    def into_row(self) -> Row | None:
        """The first row of the first result set, if any."""
        rows = self.into_first_result()
        return rows[0] if rows else None

    def into_row_stream(self) -> Iterator[Row]:
        """Iterate over the rows only, skipping metadata items."""
        for item in self:
            if item.row is not None:
                yield item.row


def flush_done(tokens: Iterable[ReceivedToken]) -> Any:
    """Consume tokens up to a ``DONE`` token and return its payload.

    Raises the first server error seen before it, or the routing request
    if the server sent one.
    """
    first_error: Any = None
    seen_error = False
    routing: RoutingError | None = None
    for token in _surface_errors(tokens):
        if token.kind is TokenKind.ERROR:
            if not seen_error:
                first_error = token.payload
                seen_error = True
        elif token.kind is TokenKind.DONE:
            if seen_error:
                raise ServerError(first_error)
            if routing is not None:
                raise routing
            return token.payload
        elif token.kind is TokenKind.ENV_CHANGE and isinstance(
            token.payload, RoutingError
        ):
            routing = token.payload
    raise ProtocolError("Never got DONE token.")