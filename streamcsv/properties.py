"""Immutable parse/format configuration attached to a Document."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from .errors import PropertiesError

CR = "\r"
LF = "\n"
CRLF = CR + LF


class RowSep(Enum):
    CRLF = CRLF
    CR = CR
    LF = LF

    @property
    def text(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: Any) -> "RowSep":
        """Accept a RowSep, its name ("crlf", "LF", ...) or the literal line ending."""
        if isinstance(raw, RowSep):
            return raw
        if isinstance(raw, str):
            for member in cls:
                if raw == member.value or raw.upper() == member.name:
                    return member
        raise PropertiesError(f"Unknown row separator: {raw!r}")


# camelCase option names -> attribute names
_OPTION_ALIASES = {
    "quote": "quote",
    "fieldSep": "field_sep",
    "rowSep": "row_sep",
    "hasHeader": "has_header",
    "hasRowLabel": "has_row_label",
    "filePath": "file_path",
    "encoding": "encoding",
}


@dataclass(frozen=True)
class Properties:
    quote: str = '"'
    field_sep: str = ","
    row_sep: RowSep = RowSep.LF
    has_header: bool = False       # first row holds column labels
    has_row_label: bool = False    # first column holds row labels
    file_path: Optional[str] = None
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not isinstance(self.row_sep, RowSep):
            object.__setattr__(self, "row_sep", RowSep.parse(self.row_sep))
        for name in ("quote", "field_sep"):
            ch = getattr(self, name)
            if not isinstance(ch, str) or len(ch) != 1:
                raise PropertiesError(f"{name} must be a single character, got {ch!r}")
            if ch in (CR, LF):
                raise PropertiesError(f"{name} cannot be a line break")
        if self.quote == self.field_sep:
            raise PropertiesError(f"quote and field_sep must differ, both are {self.quote!r}")

    def replace(self, **changes: Any) -> "Properties":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "Properties":
        """
        Build Properties from a plain mapping.
        Keys may be attribute names (field_sep) or option names (fieldSep).
        """
        kwargs = {}
        fields = {f.name for f in dataclasses.fields(cls)}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in fields:
                raise PropertiesError(f"Unknown option: {key!r}")
            if name in kwargs:
                raise PropertiesError(f"Option given twice: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)


DEFAULT_PROPERTIES = Properties()


def resolve(properties: Optional[Properties] = None, **overrides: Any) -> Properties:
    base = DEFAULT_PROPERTIES if properties is None else properties
    return base.replace(**overrides) if overrides else base


__all__ = ["CR", "LF", "CRLF", "RowSep", "Properties", "DEFAULT_PROPERTIES", "resolve"]
