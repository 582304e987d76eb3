"""Buffer-at-once CSV serialization that round-trips through FieldLexer."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

from .properties import CR, LF, Properties, resolve


def needs_quotes(text: str, properties: Properties) -> bool:
    return (
        properties.field_sep in text
        or properties.quote in text
        or CR in text
        or LF in text
    )


def format_field(text: str, properties: Properties) -> str:
    q = properties.quote
    if not needs_quotes(text, properties):
        return text
    return q + text.replace(q, q + q) + q


def format_row(fields: Sequence[str], properties: Properties) -> str:
    # a lone empty field would read back as a blank line
    if len(fields) == 1 and fields[0] == "":
        line = properties.quote * 2
    else:
        line = properties.field_sep.join(format_field(f, properties) for f in fields)
    return line + properties.row_sep.text


def dumps_rows(
    rows: Iterable[Sequence[str]],
    properties: Optional[Properties] = None,
    **overrides: Any,
) -> str:
    props = resolve(properties, **overrides)
    parts: List[str] = [format_row(r, props) for r in rows]
    return "".join(parts)


def write_rows(
    f: Any,
    rows: Iterable[Sequence[str]],
    properties: Optional[Properties] = None,
    **overrides: Any,
) -> int:
    """Write all rows to the text stream `f` in one call; returns characters written."""
    text = dumps_rows(rows, properties, **overrides)
    f.write(text)
    return len(text)


__all__ = ["needs_quotes", "format_field", "format_row", "dumps_rows", "write_rows"]
