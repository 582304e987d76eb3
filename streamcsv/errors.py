"""Exception types raised by streamcsv."""

from __future__ import annotations

from typing import Optional


# ----------------------------
# Data errors
# ----------------------------

class CSVError(ValueError):
    """Base class for malformed input, bad keys and conversion failures."""


class PropertiesError(CSVError):
    """Raised when a Properties value is inconsistent (e.g. quote == separator)."""


class CSVSyntaxError(CSVError):
    """Raised by the field lexer with the location of the offending character."""

    def __init__(
        self,
        *,
        offset: int,
        line: int,
        row: int,
        col: int,
        reason: str,
    ) -> None:
        super().__init__(
            f"{type(self).__name__}(offset={offset}, line={line}, row={row}, col={col}): {reason}"
        )
        self.offset = offset    # 0-based character offset of the offending character
        self.line = line        # 1-based physical line in the input
        self.row = row          # 0-based logical row (quoted line breaks do not count)
        self.col = col          # 0-based field index within the row
        self.reason = reason


class UnexpectedQuoteError(CSVSyntaxError):
    """A quote appeared inside an unquoted field after its content started."""


class UnescapedQuoteError(CSVSyntaxError):
    """A quote inside a quoted field was followed by something other than a quote or separator."""


class UnterminatedQuoteError(CSVSyntaxError):
    """Input ended while a quoted field was still open."""


class CSVDecodeError(CSVError):
    """Raised when source bytes are not valid in the configured encoding."""

    def __init__(self, *, offset: int, encoding: str, reason: str) -> None:
        super().__init__(f"{type(self).__name__}(offset={offset}, encoding={encoding}): {reason}")
        self.offset = offset    # 0-based byte offset of the first undecodable byte
        self.encoding = encoding
        self.reason = reason


class LabelNotFoundError(CSVError, KeyError):
    def __init__(self, label: str, *, axis: str, reason: Optional[str] = None) -> None:
        self.label = label
        self.axis = axis
        self.reason = reason or f"{axis} label not found: {label!r}"
        super().__init__(self.reason)

    def __str__(self) -> str:
        return self.reason


class DuplicateLabelError(CSVError):
    def __init__(self, label: str, *, axis: str) -> None:
        super().__init__(f"Duplicate {axis} label: {label!r}")
        self.label = label
        self.axis = axis


class IndexOutOfRangeError(CSVError, IndexError):
    def __init__(self, index: int, *, axis: str, size: int) -> None:
        self.index = index
        self.axis = axis
        self.size = size
        super().__init__(f"{axis} index out of range: {index} (size {size})")

    def __str__(self) -> str:
        return self.args[0]


class ConversionError(CSVError):
    """Raised when a cell cannot be converted to or from the requested type."""

    def __init__(self, *, value: str, type_name: str, reason: str) -> None:
        super().__init__(f"ConversionError(type={type_name!r}, value={value!r}): {reason}")
        self.value = value
        self.type_name = type_name
        self.reason = reason


# ----------------------------
# Caller errors
# ----------------------------

class ExhaustedReaderError(LookupError):
    """next() was called on a reader whose has_next() is false."""

    def __init__(self, message: str = "Reader is exhausted") -> None:
        super().__init__(message)


class ExhaustedInputError(ExhaustedReaderError):
    """next() was called on a field lexer with no input left."""

    def __init__(self, message: str = "Nothing left to read from the input") -> None:
        super().__init__(message)


__all__ = [
    "CSVError",
    "PropertiesError",
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
