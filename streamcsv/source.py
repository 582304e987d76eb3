"""Forward-only character source consumed by the field lexer."""

from __future__ import annotations

import codecs
from typing import Any, Iterable, Iterator, Optional, Union

from .errors import CSVDecodeError
from .properties import CR, LF

BUFFER_SIZE = 64 * 1024

Chunk = Union[str, bytes, bytearray, memoryview]


def _read_chunks(f: Any, size: int) -> Iterator[Chunk]:
    while True:
        chunk = f.read(size)
        if not chunk:
            return
        yield chunk


def _decode(chunks: Iterable[Chunk], encoding: str) -> Iterator[str]:
    decoder = None
    consumed = 0
    for chunk in chunks:
        if isinstance(chunk, str):
            if decoder is not None:
                raise TypeError("Cannot mix str and bytes chunks in one source")
            yield chunk
            continue
        if decoder is None:
            decoder = codecs.getincrementaldecoder(encoding)()
        data = bytes(chunk)
        text = _decode_step(decoder, data, consumed, encoding)
        consumed += len(data)
        if text:
            yield text
    if decoder is not None:
        tail = _decode_step(decoder, b"", consumed, encoding, final=True)
        if tail:
            yield tail


def _decode_step(decoder: Any, data: bytes, consumed: int, encoding: str, final: bool = False) -> str:
    # bytes held back from the previous chunk are counted at the front of `e.object`
    pending = len(decoder.getstate()[0])
    try:
        return decoder.decode(data, final=final)
    except UnicodeDecodeError as e:
        raise CSVDecodeError(
            offset=consumed - pending + e.start, encoding=encoding, reason=e.reason
        ) from e


class CharSource:
    """
    Single-pass character stream over decoded text chunks.

    `offset` counts characters taken so far; `line` is the 1-based physical
    line of the next character (CRLF counts as one line break).
    """

    def __init__(self, chunks: Iterable[str]) -> None:
        self._chunks = iter(chunks)
        self._buf = ""
        self._pos = 0
        self.offset = 0
        self.line = 1
        self._last = ""

    @classmethod
    def of(
        cls,
        data: Any,
        *,
        encoding: str = "utf-8",
        chunk_size: int = BUFFER_SIZE,
    ) -> "CharSource":
        """
        Build a source from str, bytes-like data, a file-like object with
        read(), or an iterable of str/bytes chunks.
        """
        if isinstance(data, CharSource):
            return data
        if isinstance(data, str):
            return cls([data])
        if isinstance(data, (bytes, bytearray, memoryview)):
            return cls(_decode([data], encoding))
        if hasattr(data, "read"):
            return cls(_decode(_read_chunks(data, chunk_size), encoding))
        if isinstance(data, Iterable):
            return cls(_decode(data, encoding))
        raise TypeError(f"Unsupported CSV source: {type(data).__name__}")

    def _fill(self) -> bool:
        while self._pos >= len(self._buf):
            chunk: Optional[str] = next(self._chunks, None)
            if chunk is None:
                return False
            self._buf = chunk
            self._pos = 0
        return True

    def has_next(self) -> bool:
        return self._fill()

    def peek(self) -> str:
        if not self._fill():
            raise EOFError("peek past end of CSV source")
        return self._buf[self._pos]

    def take(self) -> str:
        if not self._fill():
            raise EOFError("read past end of CSV source")
        ch = self._buf[self._pos]
        self._pos += 1
        self.offset += 1
        if ch == LF and self._last != CR or ch == CR:
            self.line += 1
        self._last = ch
        return ch


__all__ = ["BUFFER_SIZE", "CharSource"]
