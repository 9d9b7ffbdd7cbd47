"""Content adapters between remote blobs and line/byte streams."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

from hubfs.fs.exceptions import UnsupportedOperationError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from types import TracebackType


class ContentReader:
    """Serve a blob either as decoded lines or as raw bytes.

    With an *encoding* the content is decoded and split on *delimiter*;
    without one it is served byte by byte.
    """

    def __init__(
        self,
        data: bytes,
        *,
        encoding: str | None = None,
        delimiter: str | None = "\n",
    ) -> None:
        self._items: list[str] | bytes | None
        if encoding is None:
            self._items = data
        else:
            self._items = data.decode(encoding).split(delimiter or "\n")
        self._position = 0

    @property
    def lines(self) -> list[str] | None:
        return self._items if isinstance(self._items, list) else None

    @property
    def data(self) -> bytes | None:
        return self._items if isinstance(self._items, bytes) else None

    @property
    def position(self) -> int:
        return self._position

    def _length(self) -> int:
        return len(self._items) if self._items is not None else 0

    def read(self, count: int = 0) -> list[str] | bytes:
        """Everything when *count* <= 0, else the next *count* items."""
        if self._items is None:
            raise ValueError("Reader is closed")
        if count <= 0:
            return self._items
        chunk = self._items[self._position : self._position + count]
        self._position += len(chunk)
        return chunk

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the position; clamped to the available items."""
        if whence == os.SEEK_SET:
            position = offset
        elif whence == os.SEEK_CUR:
            position = self._position + offset
        elif whence == os.SEEK_END:
            position = self._length() - offset
        else:
            raise ValueError(f"Invalid whence: {whence}")
        self._position = max(0, min(position, self._length()))
        return self._position

    def close(self) -> None:
        self._items = None

    def __enter__(self) -> ContentReader:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class ContentWriter:
    """Buffer written items and hand the bytes to *on_close* once.

    Strings are UTF-8 encoded and terminated with a newline; ``bytes``
    are appended as-is; single ``int`` values are appended as one byte.
    """

    def __init__(self, on_close: Callable[[bytes], Any]) -> None:
        self._on_close = on_close
        self._buffer = bytearray()
        self._closed = False

    @property
    def buffer(self) -> bytes:
        return bytes(self._buffer)

    def write(self, items: Iterable[Any] | str | bytes) -> int:
        """Append *items*; return the number of bytes buffered so far."""
        if self._closed:
            raise ValueError("Writer is closed")
        if isinstance(items, (str, bytes, bytearray)):
            items = [items]
        for item in items:
            if isinstance(item, str):
                self._buffer.extend(item.encode("utf-8"))
                self._buffer.extend(b"\n")
            elif isinstance(item, (bytes, bytearray)):
                self._buffer.extend(item)
            elif isinstance(item, int):
                self._buffer.append(item)
            else:
                raise TypeError(f"Cannot write {type(item).__name__}")
        return len(self._buffer)

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> None:
        raise UnsupportedOperationError("Cannot seek while writing remote content")

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._on_close(bytes(self._buffer))

    def __enter__(self) -> ContentWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()
        else:
            self._closed = True
