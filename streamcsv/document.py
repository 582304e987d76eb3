"""
In-memory CSV document.

Storage is a row-major mesh of sparse rows (Dict[int, str]). With
has_header the first mesh row holds column labels; with has_row_label the
first mesh column holds row labels. Public indices skip both, so column 0 is
the first data column and row 0 the first data row.

Keys are either int positions or str labels. Getters and removers raise
IndexOutOfRangeError / LabelNotFoundError for unknown keys; setters grow the
document when given positions past the end.
"""

from __future__ import annotations

import itertools
import logging
import operator
import os
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type, Union

from .convert import DEFAULT, Converter, TypeDialect, to_text, to_value
from .errors import (
    DuplicateLabelError,
    IndexOutOfRangeError,
    LabelNotFoundError,
    PropertiesError,
)
from .lexer import RowAssembler
from .properties import Properties, resolve
from .readers import Reader, enumerate_reader, sequence, wrap
from .writer import dumps_rows

logger = logging.getLogger(__name__)

MeshRow = Dict[int, str]
Key = Union[int, str]


def _mesh_row(fields: Sequence[str]) -> MeshRow:
    return dict(enumerate_reader(wrap(fields)).collect())


def _width(row: MeshRow) -> int:
    return max(row) + 1 if row else 0


class Document:
    def __init__(
        self,
        properties: Optional[Properties] = None,
        *,
        type_dialect: TypeDialect = DEFAULT,
        **overrides: Any,
    ) -> None:
        self.properties = resolve(properties, **overrides)
        self.type_dialect = type_dialect
        self._mesh: List[MeshRow] = []
        self._column_labels: Dict[str, int] = {}
        self._row_labels: Dict[str, int] = {}
        # widest mesh row, label column included
        self._widest = 0

    # ----------------------------
    # Construction
    # ----------------------------

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Sequence[str]],
        properties: Optional[Properties] = None,
        **kwargs: Any,
    ) -> "Document":
        """Build a document from rows in load order (header and label cells included)."""
        doc = cls(properties, **kwargs)
        doc._mesh = wrap(rows).map(_mesh_row).collect()
        doc._reindex()
        doc._measure()
        return doc

    @classmethod
    def read(cls, source: Any, properties: Optional[Properties] = None, **kwargs: Any) -> "Document":
        """Parse `source` (text, bytes, file object or chunks) into a new document."""
        rows = RowAssembler(source, properties)
        doc = cls.from_rows(rows, rows.properties, **kwargs)
        logger.debug(
            "Loaded CSV: %d rows x %d columns (header=%s, row labels=%s)",
            doc.row_count, doc.column_count,
            doc.properties.has_header, doc.properties.has_row_label,
        )
        return doc

    # ----------------------------
    # Index helpers
    # ----------------------------

    @property
    def _row_offset(self) -> int:
        return 1 if self.properties.has_header else 0

    @property
    def _col_offset(self) -> int:
        return 1 if self.properties.has_row_label else 0

    def _row_index(self, key: Key, *, grow: bool = False) -> int:
        if isinstance(key, str):
            if not self.properties.has_row_label:
                raise LabelNotFoundError(
                    key, axis="row", reason=f"Document has no row labels (looking up {key!r})"
                )
            if key not in self._row_labels:
                raise LabelNotFoundError(key, axis="row")
            return self._row_labels[key]
        index = operator.index(key)
        if index < 0 or (not grow and index >= self.row_count):
            raise IndexOutOfRangeError(index, axis="row", size=self.row_count)
        return index + self._row_offset

    def _column_index(self, key: Key, *, grow: bool = False) -> int:
        if isinstance(key, str):
            if not self.properties.has_header:
                raise LabelNotFoundError(
                    key, axis="column", reason=f"Document has no header row (looking up {key!r})"
                )
            if key not in self._column_labels:
                raise LabelNotFoundError(key, axis="column")
            return self._column_labels[key]
        index = operator.index(key)
        if index < 0 or (not grow and index >= self.column_count):
            raise IndexOutOfRangeError(index, axis="column", size=self.column_count)
        return index + self._col_offset

    def _ensure_row(self, mesh_index: int) -> MeshRow:
        while len(self._mesh) <= mesh_index:
            self._mesh.append({})
        return self._mesh[mesh_index]

    def _data_rows(self) -> Reader[MeshRow]:
        return wrap(itertools.islice(self._mesh, self._row_offset, None))

    def _reindex(self) -> None:
        """
        Rebuild both label maps from the header row and the label column.
        A label that appears more than once addresses its last occurrence;
        the earlier ones stay reachable by index only.
        """
        self._column_labels = {}
        self._row_labels = {}
        if self.properties.has_header and self._mesh:
            header = self._mesh[0]
            for c in sorted(header):
                if c >= self._col_offset:
                    self._add_label(self._column_labels, header[c], c)
        if self.properties.has_row_label:
            labelled = enumerate_reader(self._data_rows(), self._row_offset)
            for r, row in labelled:
                self._add_label(self._row_labels, row.get(0, ""), r)

    @staticmethod
    def _add_label(labels: Dict[str, int], label: str, index: int) -> None:
        # empty labels stay unaddressable
        if label == "":
            return
        if label in labels:
            logger.debug("Label %r repeated; index %d replaces %d", label, index, labels[label])
        labels[label] = index

    def _measure(self) -> None:
        self._widest = max(wrap(self._mesh).map(_width), default=0)

    def _widen(self, width: int) -> None:
        if width > self._widest:
            self._widest = width

    # ----------------------------
    # Sizing
    # ----------------------------

    @property
    def row_count(self) -> int:
        return max(0, len(self._mesh) - self._row_offset)

    @property
    def column_count(self) -> int:
        return max(0, self._widest - self._col_offset)

    def cell_count(self, row: Key) -> int:
        """Number of cells present (not holes) in a data row."""
        mesh_row = self._mesh[self._row_index(row)]
        return sum(1 for c in mesh_row if c >= self._col_offset)

    # ----------------------------
    # Columns
    # ----------------------------

    def _column_reader(self, c: int, fill: str, skip_missing: bool) -> Reader[str]:
        rows = self._data_rows()
        if skip_missing:
            return rows.filter(lambda row: c in row).map(lambda row: row[c])
        return rows.map(lambda row: row.get(c, fill))

    def get_column(
        self,
        key: Key,
        type_: Type[Any] = str,
        *,
        fill: Any = "",
        skip_missing: bool = False,
        converter: Optional[Converter] = None,
    ) -> List[Any]:
        """
        Values of one column, top to bottom.
        Holes become `fill` (converted like any other cell), or are dropped
        when skip_missing is set.
        """
        c = self._column_index(key)
        fill_text = to_text(fill, self.type_dialect)
        td = self.type_dialect
        return (
            self._column_reader(c, fill_text, skip_missing)
            .map(lambda text: to_value(text, type_, td, converter=converter))
            .collect()
        )

    def set_column(self, key: Key, values: Sequence[Any], *, converter: Optional[Converter] = None) -> int:
        """
        Replace a column. Extra values append rows; rows past the end of
        `values` lose their cell. Returns the row count.
        """
        c = self._column_index(key, grow=True)
        texts = [to_text(v, self.type_dialect, converter=converter) for v in values]
        if texts:
            self._ensure_row(self._row_offset + len(texts) - 1)
            self._widen(c + 1)
        dropped = False
        for i, row in self._data_rows().enumerate():
            if i < len(texts):
                row[c] = texts[i]
            elif row.pop(c, None) is not None:
                dropped = True
        if dropped:
            self._measure()
        return self.row_count

    def remove_column(self, key: Key) -> int:
        """Delete a column and shift later columns left. Returns the column count."""
        c = self._column_index(key)
        for row in self._mesh:
            shifted = {(k - 1 if k > c else k): v for k, v in row.items() if k != c}
            row.clear()
            row.update(shifted)
        self._reindex()
        self._measure()
        return self.column_count

    # ----------------------------
    # Rows
    # ----------------------------

    def _row_values(self, r: int, fill: str) -> Reader[str]:
        row = self._mesh[r]
        start = self._col_offset
        return sequence(start, start + self.column_count).map(lambda c: row.get(c, fill))

    def get_row(
        self,
        key: Key,
        type_: Type[Any] = str,
        *,
        fill: Any = "",
        converter: Optional[Converter] = None,
    ) -> List[Any]:
        """Values of one data row, padded with `fill` to column_count."""
        r = self._row_index(key)
        td = self.type_dialect
        return (
            self._row_values(r, to_text(fill, td))
            .map(lambda text: to_value(text, type_, td, converter=converter))
            .collect()
        )

    def set_row(self, key: Key, values: Sequence[Any], *, converter: Optional[Converter] = None) -> None:
        """Replace a data row; its row label (if any) is kept."""
        r = self._row_index(key, grow=True)
        old = self._ensure_row(r)
        row: MeshRow = {}
        if self._col_offset and 0 in old:
            row[0] = old[0]
        for i, value in enumerate_reader(wrap(values), self._col_offset):
            row[i] = to_text(value, self.type_dialect, converter=converter)
        self._mesh[r] = row
        if _width(old) > _width(row):
            self._measure()
        else:
            self._widen(_width(row))

    def remove_row(self, key: Key) -> List[str]:
        """Delete a data row, shifting later rows up. Returns its values."""
        r = self._row_index(key)
        values = self._row_values(r, "").collect()
        del self._mesh[r]
        self._reindex()
        self._measure()
        return values

    # ----------------------------
    # Cells
    # ----------------------------

    def get_cell(
        self,
        row: Key,
        column: Key,
        type_: Type[Any] = str,
        *,
        converter: Optional[Converter] = None,
    ) -> Any:
        r = self._row_index(row)
        c = self._column_index(column)
        return to_value(self._mesh[r].get(c, ""), type_, self.type_dialect, converter=converter)

    def set_cell(self, row: Key, column: Key, value: Any, *, converter: Optional[Converter] = None) -> None:
        r = self._row_index(row, grow=True)
        c = self._column_index(column, grow=True)
        text = to_text(value, self.type_dialect, converter=converter)
        self._ensure_row(r)[c] = text
        self._widen(c + 1)

    def remove_cell(self, row: Key, column: Key) -> str:
        """Erase a cell, leaving a hole. Returns the old text ("" for a hole)."""
        r = self._row_index(row)
        c = self._column_index(column)
        text = self._mesh[r].pop(c, "")
        if c + 1 == self._widest:
            self._measure()
        return text

    # ----------------------------
    # Labels
    # ----------------------------

    def _require_header(self) -> None:
        if not self.properties.has_header:
            raise PropertiesError("Document has no header row (has_header=False)")

    def _require_row_labels(self) -> None:
        if not self.properties.has_row_label:
            raise PropertiesError("Document has no row label column (has_row_label=False)")

    @property
    def column_labels(self) -> List[str]:
        if not self.properties.has_header or not self._mesh:
            return []
        return self._row_values(0, "").collect()

    @property
    def row_labels(self) -> List[str]:
        if not self.properties.has_row_label:
            return []
        return self._data_rows().map(lambda row: row.get(0, "")).collect()

    def get_column_label(self, index: int) -> str:
        self._require_header()
        c = self._column_index(index)
        return self._mesh[0].get(c, "")

    def get_row_label(self, index: int) -> str:
        self._require_row_labels()
        r = self._row_index(index)
        return self._mesh[r].get(0, "")

    def set_column_label(self, key: Key, label: str) -> None:
        """Rename (str key) or label (int key) a column; rejects labels already in use."""
        self._require_header()
        c = self._column_index(key, grow=isinstance(key, int))
        self._relabel(self._column_labels, label, c, axis="column")
        self._ensure_row(0)[c] = label
        self._widen(c + 1)

    def set_row_label(self, key: Key, label: str) -> None:
        """Rename (str key) or label (int key) a row; rejects labels already in use."""
        self._require_row_labels()
        r = self._row_index(key, grow=isinstance(key, int))
        self._relabel(self._row_labels, label, r, axis="row")
        self._ensure_row(r)[0] = label
        self._widen(1)

    @staticmethod
    def _relabel(labels: Dict[str, int], label: str, index: int, *, axis: str) -> None:
        if labels.get(label, index) != index:
            raise DuplicateLabelError(label, axis=axis)
        for old in [k for k, v in labels.items() if v == index]:
            del labels[old]
        if label != "":
            labels[label] = index

    # ----------------------------
    # Whole document
    # ----------------------------

    def to_rows(self) -> List[List[str]]:
        """Every mesh row (header and label cells included), holes as ""."""
        return (
            wrap(self._mesh)
            .map(lambda row: sequence(0, _width(row)).map(lambda c: row.get(c, "")).collect())
            .collect()
        )

    def dumps(self) -> str:
        return dumps_rows(self.to_rows(), self.properties)

    def save(self, path: Optional[Union[str, "os.PathLike[str]"]] = None) -> None:
        """Write the whole document to `path` (default: properties.file_path)."""
        target = path if path is not None else self.properties.file_path
        if target is None:
            raise PropertiesError("No path given and properties.file_path is not set")
        text = self.dumps()
        with open(target, "w", encoding=self.properties.encoding, newline="") as f:
            f.write(text)
        logger.debug("Saved CSV to %s: %d rows", os.fspath(target), len(self._mesh))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Document):
            return NotImplemented
        return (
            self.properties.has_header == other.properties.has_header
            and self.properties.has_row_label == other.properties.has_row_label
            and self.to_rows() == other.to_rows()
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Document(rows={self.row_count}, columns={self.column_count}, properties={self.properties!r})"


# ----------------------------
# Load / save wrappers
# ----------------------------

def loads(text: str, properties: Optional[Properties] = None, **overrides: Any) -> Document:
    return Document.read(text, resolve(properties, **overrides))


def load_path(
    path: Union[str, "os.PathLike[str]"],
    properties: Optional[Properties] = None,
    **overrides: Any,
) -> Document:
    props = resolve(properties, **overrides).replace(file_path=os.fspath(path))
    with open(path, "rb") as f:
        return Document.read(f, props)


def load(source: Any = None, properties: Optional[Properties] = None, **overrides: Any) -> Document:
    """
    Load a document from a path (str or PathLike), a file object, bytes or
    chunks. With no source, properties.file_path is read.
    """
    props = resolve(properties, **overrides)
    if source is None:
        if props.file_path is None:
            raise PropertiesError("No source given and properties.file_path is not set")
        source = props.file_path
    if isinstance(source, (str, os.PathLike)):
        return load_path(source, props)
    return Document.read(source, props)


def save(document: Document, path: Optional[Union[str, "os.PathLike[str]"]] = None) -> None:
    document.save(path)


__all__ = ["Document", "load", "loads", "load_path", "save"]
