"""Iterators and byte streams that advance a progress display as they are used."""

from __future__ import annotations

import operator
from typing import Any, Generic, Iterable, Iterator, Protocol, TypeVar

T = TypeVar("T")


class Progress(Protocol):
    """What the wrappers in this module need from a progress display."""

    def inc(self, delta: int) -> None: ...

    def set_position(self, pos: int) -> None: ...

    def is_finished(self) -> bool: ...

    def finish_using_style(self) -> None: ...


class ProgressBarIter(Generic[T]):
    """Wraps an iterable; each item advances the progress by one.

    When the iterable is exhausted the progress is finished, once.
    """

    def __init__(self, iterable: Iterable[T], progress: Progress) -> None:
        self._it = iter(iterable)
        self.progress = progress

    def __iter__(self) -> ProgressBarIter[T]:
        return self

    def __next__(self) -> T:
        try:
            item = next(self._it)
        except StopIteration:
            if not self.progress.is_finished():
                self.progress.finish_using_style()
            raise
        self.progress.inc(1)
        return item

    def __len__(self) -> int:
        """The number of items still to come, when the iterable can tell."""
        remaining = operator.length_hint(self._it, -1)
        if remaining < 0:
            raise TypeError("length of the wrapped iterable is unknown")
        return remaining


def progress_with(iterable: Iterable[T], progress: Progress) -> ProgressBarIter[T]:
    """Wrap ``iterable`` so that iterating it advances ``progress``."""
    return ProgressBarIter(iterable, progress)


class ProgressReader:
    """A readable stream that advances the progress by the bytes read."""

    def __init__(self, stream: Any, progress: Progress) -> None:
        self._stream = stream
        self.progress = progress

    def read(self, size: int = -1) -> Any:
        data = self._stream.read(size)
        if data:
            self.progress.inc(len(data))
        return data

    def readinto(self, buffer: Any) -> Any:
        count = self._stream.readinto(buffer)
        if count:
            self.progress.inc(count)
        return count

    def readline(self, size: int = -1) -> Any:
        line = self._stream.readline(size)
        if line:
            self.progress.inc(len(line))
        return line

    def seek(self, offset: int, whence: int = 0) -> int:
        """Seek the stream and move the progress to the new position."""
        pos = self._stream.seek(offset, whence)
        self.progress.set_position(pos)
        return pos

    def tell(self) -> int:
        return self._stream.tell()

    def __enter__(self) -> ProgressReader:
        return self

    def __exit__(self, *args: object) -> None:
        self._stream.close()


class ProgressWriter:
    """A writable stream that advances the progress by the bytes written."""

    def __init__(self, stream: Any, progress: Progress) -> None:
        self._stream = stream
        self.progress = progress

    def write(self, data: Any) -> int:
        count = self._stream.write(data)
        if count is None:
            count = len(data)
        if count:
            self.progress.inc(count)
        return count

    def writelines(self, lines: Iterable[Any]) -> None:
        for line in lines:
            self.write(line)

    def flush(self) -> None:
        self._stream.flush()

    def seek(self, offset: int, whence: int = 0) -> int:
        """Seek the stream and move the progress to the new position."""
        pos = self._stream.seek(offset, whence)
        self.progress.set_position(pos)
        return pos

    def tell(self) -> int:
        return self._stream.tell()

    def __enter__(self) -> ProgressWriter:
        return self

    def __exit__(self, *args: object) -> None:
        self._stream.close()