"""
Lazy pull-based readers.

A Reader produces values on demand through two calls:
- has_next() -> is there another value
- next()     -> produce it and advance; raises ExhaustedReaderError past the end

Readers compose without buffering: transform (map), keep_if (filter),
zip_readers, enumerate_reader and sequence all return new readers that pull
from their sources one element at a time. Every reader is also a Python
iterator, so `for x in reader` and `list(reader)` work.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar

from .errors import ExhaustedReaderError

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Some(Generic[T]):
    """A present value; a pull returning None means the source is done."""
    value: T


Pull = Callable[[], Optional[Some[T]]]


# ----------------------------
# Reader interface
# ----------------------------

class Reader(ABC, Generic[T]):
    exhausted_error = ExhaustedReaderError

    @abstractmethod
    def has_next(self) -> bool:
        ...

    @abstractmethod
    def next(self) -> T:
        ...

    def __iter__(self) -> "Reader[T]":
        return self

    def __next__(self) -> T:
        if not self.has_next():
            raise StopIteration
        return self.next()

    def map(self, func: Callable[[T], R]) -> "Reader[R]":
        return transform(self, func)

    def filter(self, predicate: Callable[[T], bool]) -> "Reader[T]":
        return keep_if(self, predicate)

    def enumerate(self, start: int = 0) -> "Reader[Tuple[int, T]]":
        return enumerate_reader(self, start)

    def collect(self) -> List[T]:
        out: List[T] = []
        while self.has_next():
            out.append(self.next())
        return out


class PullReader(Reader[T]):
    """
    Reader driven by a pull closure.
    The closure returns Some(value) while values remain and None once done;
    after the first None it is never called again.
    """

    def __init__(self, pull: Pull) -> None:
        self._pull = pull
        self._ahead: Optional[Some[T]] = None
        self._done = False

    def has_next(self) -> bool:
        if self._ahead is None and not self._done:
            self._ahead = self._pull()
            if self._ahead is None:
                self._done = True
        return self._ahead is not None

    def next(self) -> T:
        if not self.has_next():
            raise self.exhausted_error()
        assert self._ahead is not None
        value = self._ahead.value
        self._ahead = None
        return value


# ----------------------------
# Sources
# ----------------------------

def wrap(iterable: Iterable[T]) -> Reader[T]:
    """Adapt any iterable; readers are returned unchanged."""
    if isinstance(iterable, Reader):
        return iterable
    it = iter(iterable)

    def pull() -> Optional[Some[T]]:
        for value in it:
            return Some(value)
        return None

    return PullReader(pull)


def sequence(start: int = 0, end: Optional[int] = None, step: int = 1) -> Reader[int]:
    """Integers start, start+step, ... stopping before `end` (unbounded if None)."""
    if step == 0:
        raise ValueError("sequence step must not be zero")
    counter: Iterator[int] = itertools.count(start, step)

    def pull() -> Optional[Some[int]]:
        value = next(counter)
        if end is not None and (value >= end if step > 0 else value <= end):
            return None
        return Some(value)

    return PullReader(pull)


# ----------------------------
# Combinators
# ----------------------------

def transform(reader: Reader[T], func: Callable[[T], R]) -> Reader[R]:
    def pull() -> Optional[Some[R]]:
        if reader.has_next():
            return Some(func(reader.next()))
        return None

    return PullReader(pull)


def keep_if(reader: Reader[T], predicate: Callable[[T], bool]) -> Reader[T]:
    """
    Keep only values for which predicate holds.
    has_next() skips ahead to the next match and caches it for next().
    """

    def pull() -> Optional[Some[T]]:
        while reader.has_next():
            value = reader.next()
            if predicate(value):
                return Some(value)
        return None

    return PullReader(pull)


def zip_readers(*readers: Reader[Any]) -> Reader[Tuple[Any, ...]]:
    """Tuples of one value per reader; ends as soon as any reader ends."""

    def pull() -> Optional[Some[Tuple[Any, ...]]]:
        if readers and all(r.has_next() for r in readers):
            return Some(tuple(r.next() for r in readers))
        return None

    return PullReader(pull)


def enumerate_reader(reader: Reader[T], start: int = 0) -> Reader[Tuple[int, T]]:
    return zip_readers(sequence(start), reader)


__all__ = [
    "Some",
    "Reader",
    "PullReader",
    "wrap",
    "sequence",
    "transform",
    "keep_if",
    "zip_readers",
    "enumerate_reader",
]
