"""
Field lexer and row assembler.

FieldLexer turns a character source into a stream of tokens: field strings
and the END_OF_ROW marker. RowAssembler groups those tokens into rows.

Quoting rules (quote and separator come from Properties):
- a field starting with the quote character is quoted; the outer quotes are dropped
- inside a quoted field, separators and line breaks are literal and a doubled
  quote stands for one quote
- a quote anywhere else in an unquoted field is an error
- CR, LF and CRLF all end a row outside quotes

Blank lines give empty rows; the line break that ends the final line does not
start another row, so "a\\n" and "a" both yield the single row ["a"].
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional, Union

from .errors import (
    CSVSyntaxError,
    ExhaustedInputError,
    UnescapedQuoteError,
    UnexpectedQuoteError,
    UnterminatedQuoteError,
)
from .properties import CR, LF, Properties, resolve
from .readers import Reader
from .source import CharSource

logger = logging.getLogger(__name__)


class EndOfRow:
    """Marker token closing a row; never equal to any field string."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "END_OF_ROW"


END_OF_ROW = EndOfRow()

Token = Union[str, EndOfRow]


class _State(Enum):
    UNQUOTED = "unquoted"
    QUOTED_OPEN = "quoted"
    QUOTED_MAYBE_CLOSING = "quote-in-quoted"


# ----------------------------
# Field lexer
# ----------------------------

class FieldLexer(Reader[Token]):
    exhausted_error = ExhaustedInputError

    def __init__(self, source: Any, properties: Optional[Properties] = None, **overrides: Any) -> None:
        self.properties = resolve(properties, **overrides)
        self._src = CharSource.of(source, encoding=self.properties.encoding)
        self._quote = self.properties.quote
        self._sep = self.properties.field_sep
        self._end_pending = False     # next token is END_OF_ROW
        self._field_pending = False   # a separator was consumed; a field must follow
        self.row = 0                  # logical row of the next token
        self.col = 0                  # field index of the next field within the row

    def has_next(self) -> bool:
        return self._end_pending or self._field_pending or self._src.has_next()

    def next(self) -> Token:
        if not self.has_next():
            raise self.exhausted_error()

        if self._end_pending:
            return self._end_row()

        if self.col == 0 and not self._field_pending and self._src.peek() in (CR, LF):
            self._take_line_break()
            return self._end_row()

        self._field_pending = False
        text = self._lex_field()
        self.col += 1
        return text

    def _end_row(self) -> EndOfRow:
        self._end_pending = False
        self.row += 1
        self.col = 0
        return END_OF_ROW

    def _take_line_break(self) -> None:
        if self._src.take() == CR and self._src.has_next() and self._src.peek() == LF:
            self._src.take()

    def _error(self, kind: type, reason: str, *, offset: int, line: int) -> CSVSyntaxError:
        err = kind(offset=offset, line=line, row=self.row, col=self.col, reason=reason)
        logger.debug("CSV syntax error: %s", err)
        return err

    def _lex_field(self) -> str:
        src = self._src
        quote, sep = self._quote, self._sep
        buf: List[str] = []
        state = _State.UNQUOTED
        started = False
        quote_offset = quote_line = 0

        while src.has_next():
            if state is _State.QUOTED_OPEN:
                ch = src.take()
                if ch == quote:
                    state = _State.QUOTED_MAYBE_CLOSING
                else:
                    buf.append(ch)
                continue

            ch = src.peek()
            if ch in (CR, LF):
                self._take_line_break()
                self._end_pending = True
                return "".join(buf)

            offset, line = src.offset, src.line
            src.take()
            if ch == sep:
                self._field_pending = True
                return "".join(buf)
            if ch == quote:
                if state is _State.QUOTED_MAYBE_CLOSING:
                    buf.append(quote)
                    state = _State.QUOTED_OPEN
                elif not started:
                    state = _State.QUOTED_OPEN
                    quote_offset, quote_line = offset, line
                else:
                    raise self._error(
                        UnexpectedQuoteError,
                        "Quotes are not allowed inside non-quoted fields",
                        offset=offset, line=line,
                    )
            elif state is _State.QUOTED_MAYBE_CLOSING:
                raise self._error(
                    UnescapedQuoteError,
                    f"Quote inside a quoted field must be doubled (found {ch!r} after it)",
                    offset=offset, line=line,
                )
            else:
                buf.append(ch)
            started = True

        if state is _State.QUOTED_OPEN:
            raise self._error(
                UnterminatedQuoteError,
                "Input ended inside a quoted field",
                offset=quote_offset, line=quote_line,
            )
        self._end_pending = True
        return "".join(buf)


# ----------------------------
# Row assembler
# ----------------------------

class RowAssembler(Reader[List[str]]):
    def __init__(self, source: Any, properties: Optional[Properties] = None, **overrides: Any) -> None:
        if isinstance(source, FieldLexer):
            self._lexer = source
        else:
            self._lexer = FieldLexer(source, properties, **overrides)

    @property
    def properties(self) -> Properties:
        return self._lexer.properties

    @property
    def lexer(self) -> FieldLexer:
        return self._lexer

    def has_next(self) -> bool:
        return self._lexer.has_next()

    def next(self) -> List[str]:
        if not self.has_next():
            raise self.exhausted_error()
        row: List[str] = []
        while self._lexer.has_next():
            token = self._lexer.next()
            if token is END_OF_ROW:
                break
            row.append(token)
        return row


def field_reader(source: Any, properties: Optional[Properties] = None, **overrides: Any) -> FieldLexer:
    return FieldLexer(source, properties, **overrides)


def row_reader(source: Any, properties: Optional[Properties] = None, **overrides: Any) -> RowAssembler:
    return RowAssembler(source, properties, **overrides)


__all__ = [
    "EndOfRow",
    "END_OF_ROW",
    "Token",
    "FieldLexer",
    "RowAssembler",
    "field_reader",
    "row_reader",
]
