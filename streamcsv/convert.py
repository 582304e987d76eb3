"""
Typed cell conversion (text <-> value).

- Empty text is a missing value: "" for str, None for every other type.
- bool accepts true/t/yes/y/1 and false/f/no/n/0 (case-insensitive) and
  writes true/false.
- datetime and date use ISO format; float is written with repr().
- A Converter(parse, format) pair overrides the built-in codecs per call.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional, Tuple, Type

from .errors import ConversionError


# ----------------------------
# Type dialect
# ----------------------------

@dataclass(frozen=True)
class TypeDialect:
    # bool parsing (case-insensitive)
    bool_true: Tuple[str, ...] = ("true", "t", "yes", "y", "1")
    bool_false: Tuple[str, ...] = ("false", "f", "no", "n", "0")
    bool_format: Tuple[str, str] = ("true", "false")
    datetime_parser: Callable[[str], datetime] = staticmethod(datetime.fromisoformat)
    datetime_formatter: Callable[[datetime], str] = staticmethod(lambda dt: dt.isoformat())


DEFAULT = TypeDialect()


@dataclass(frozen=True)
class Converter:
    """Custom codec: parse(text) -> value and format(value) -> text."""
    parse: Callable[[str], Any]
    format: Callable[[Any], str] = field(default=str)


# ----------------------------
# Codecs
# ----------------------------

def _parse_bool(raw: str, td: TypeDialect) -> bool:
    s = raw.strip().lower()
    if s in td.bool_true:
        return True
    if s in td.bool_false:
        return False
    raise ValueError(f"Invalid bool literal: {raw!r}")


def _parse_decimal(raw: str) -> Decimal:
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"Invalid decimal literal: {raw!r}") from None


def _parsers(td: TypeDialect) -> Dict[type, Callable[[str], Any]]:
    return {
        int: int,
        float: float,
        bool: lambda s: _parse_bool(s, td),
        datetime: td.datetime_parser,
        date: date.fromisoformat,
        Decimal: _parse_decimal,
    }


def to_value(
    text: str,
    type_: Type[Any] = str,
    td: TypeDialect = DEFAULT,
    *,
    converter: Optional[Converter] = None,
) -> Any:
    """Convert cell text to `type_` (or through `converter`)."""
    if converter is not None:
        parse = converter.parse
        type_name = getattr(parse, "__name__", "custom")
    else:
        if type_ is str:
            return text
        if text == "":
            return None
        parsers = _parsers(td)
        if type_ not in parsers:
            raise ConversionError(
                value=text, type_name=getattr(type_, "__name__", repr(type_)),
                reason="Unsupported type (pass a Converter)",
            )
        parse = parsers[type_]
        type_name = type_.__name__

    try:
        return parse(text)
    except ConversionError:
        raise
    except Exception as e:
        raise ConversionError(
            value=text, type_name=type_name, reason=f"Parse failed: {e}"
        ) from e


def to_text(
    value: Any,
    td: TypeDialect = DEFAULT,
    *,
    converter: Optional[Converter] = None,
) -> str:
    """Format a value as cell text (None -> "")."""
    if converter is not None:
        try:
            return converter.format(value)
        except Exception as e:
            raise ConversionError(
                value=repr(value), type_name=type(value).__name__, reason=f"Format failed: {e}"
            ) from e
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return td.bool_format[0] if value else td.bool_format[1]
    if isinstance(value, datetime):
        return td.datetime_formatter(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float):
        return repr(value)
    return str(value)


__all__ = ["TypeDialect", "DEFAULT", "Converter", "to_value", "to_text"]
