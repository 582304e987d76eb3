"""
streamcsv: streaming CSV lexer, lazy readers and an indexable CSV document.

Contract (v0):
- Parsing is single pass over any character source: str, bytes, a file
  object (text or binary) or an iterable of chunks.
- Fields: a leading quote makes a quoted field; inside it separators and line
  breaks are literal and "" is one quote. Quotes elsewhere are errors:
    ab"c        -> UnexpectedQuoteError
    "ab"c       -> UnescapedQuoteError
    "ab         -> UnterminatedQuoteError (at end of input)
- Rows end at CR, LF or CRLF. A blank line is an empty row; the line break
  ending the last line does not open another row.
- Errors are fatal for the load and carry offset/line/row/col context.
- Document: row-major sparse mesh. has_header turns row 0 into column labels,
  has_row_label turns column 0 into row labels; both are skipped by positional
  access. Keys are int positions or str labels.
- Typed access: empty cells are "" for str and None otherwise; bool, int,
  float, Decimal, date and datetime built in, Converter for anything else.
- Writing: fields containing the separator, the quote or a line break are
  quoted with doubled inner quotes; lines end with properties.row_sep.

API:
- field_reader(src, ...) -> FieldLexer yielding str fields and END_OF_ROW
- row_reader(src, ...)   -> RowAssembler yielding List[str]
- load(path_or_file, ...), loads(text, ...), load_path(path, ...) -> Document
- save(document, path=None), Document.dumps()
- wrap / sequence / transform / keep_if / zip_readers / enumerate_reader

Python: 3.10+
"""

from __future__ import annotations

import logging

from .convert import DEFAULT, Converter, TypeDialect, to_text, to_value
from .document import Document, load, load_path, loads, save
from .errors import (
    ConversionError,
    CSVDecodeError,
    CSVError,
    CSVSyntaxError,
    DuplicateLabelError,
    ExhaustedInputError,
    ExhaustedReaderError,
    IndexOutOfRangeError,
    LabelNotFoundError,
    PropertiesError,
    UnescapedQuoteError,
    UnexpectedQuoteError,
    UnterminatedQuoteError,
)
from .lexer import END_OF_ROW, EndOfRow, FieldLexer, RowAssembler, field_reader, row_reader
from .properties import DEFAULT_PROPERTIES, Properties, RowSep
from .readers import (
    PullReader,
    Reader,
    Some,
    enumerate_reader,
    keep_if,
    sequence,
    transform,
    wrap,
    zip_readers,
)
from .source import CharSource
from .writer import dumps_rows, format_field, format_row, write_rows

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = [
    "__version__",
    # configuration
    "Properties",
    "RowSep",
    "DEFAULT_PROPERTIES",
    # parsing
    "CharSource",
    "FieldLexer",
    "RowAssembler",
    "EndOfRow",
    "END_OF_ROW",
    "field_reader",
    "row_reader",
    # readers
    "Some",
    "Reader",
    "PullReader",
    "wrap",
    "sequence",
    "transform",
    "keep_if",
    "zip_readers",
    "enumerate_reader",
    # document
    "Document",
    "load",
    "loads",
    "load_path",
    "save",
    # conversion
    "TypeDialect",
    "DEFAULT",
    "Converter",
    "to_value",
    "to_text",
    # writing
    "format_field",
    "format_row",
    "dumps_rows",
    "write_rows",
    # errors
    "CSVError",
    "PropertiesError",
    "CSVDecodeError",
    "CSVSyntaxError",
    "UnexpectedQuoteError",
    "UnescapedQuoteError",
    "UnterminatedQuoteError",
    "LabelNotFoundError",
    "DuplicateLabelError",
    "IndexOutOfRangeError",
    "ConversionError",
    "ExhaustedReaderError",
    "ExhaustedInputError",
]
