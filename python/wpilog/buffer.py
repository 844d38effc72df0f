"""Incremental byte accumulation over an asynchronous byte source."""

from __future__ import annotations

from typing import AsyncIterable, AsyncIterator

from .errors import EndOfStream, SourceError, WPILogError


class IncrementalBuffer:
    """Pulls chunks from an async byte source as reads demand them.

    Consumed bytes are dropped from the front of the buffer on every
    ``consume``, so the retained size is bounded by the largest pending
    request plus whatever the last chunk carried past it.
    """

    def __init__(self, source: AsyncIterable[bytes]):
        self._source: AsyncIterator[bytes] = source.__aiter__()
        self._buf = bytearray()
        self._cursor = 0
        self._consumed = 0  # bytes released before _buf[0]
        self._exhausted = False

    @property
    def position(self) -> int:
        """Absolute stream offset of the read cursor."""
        return self._consumed + self._cursor

    @property
    def available(self) -> int:
        """Unread bytes currently held."""
        return len(self._buf) - self._cursor

    @property
    def retained(self) -> int:
        """Total bytes held in memory, read or not."""
        return len(self._buf)

    async def _pull(self) -> bool:
        """Append one chunk from the source.  Returns False at exhaustion."""
        if self._exhausted:
            return False
        try:
            chunk = await self._source.__anext__()
        except StopAsyncIteration:
            self._exhausted = True
            return False
        except WPILogError:
            raise
        except Exception as exc:
            self._exhausted = True
            raise SourceError(f"byte source failed: {exc}",
                              self._consumed + len(self._buf)) from exc
        if chunk:
            self._buf.extend(chunk)
        return True

    async def ensure(self, n: int, what: str = "data") -> None:
        """Wait until at least *n* unread bytes are buffered."""
        while self.available < n:
            if not await self._pull():
                raise EndOfStream(what, n, self.available, self.position)

    async def at_end(self) -> bool:
        """True when nothing is left unread and the source is drained."""
        while self.available == 0:
            if not await self._pull():
                return True
        return False

    def peek_bytes(self, n: int) -> bytes:
        if n > self.available:
            raise EndOfStream("buffered data", n, self.available, self.position)
        return bytes(self._buf[self._cursor:self._cursor + n])

    def consume(self, n: int) -> None:
        if n > self.available:
            raise EndOfStream("buffered data", n, self.available, self.position)
        self._cursor += n
        # Compact: release everything before the cursor.
        del self._buf[:self._cursor]
        self._consumed += self._cursor
        self._cursor = 0

    def read_bytes(self, n: int) -> bytes:
        data = self.peek_bytes(n)
        self.consume(n)
        return data

    async def read(self, n: int, what: str = "data") -> bytes:
        """``ensure`` then ``read_bytes``."""
        await self.ensure(n, what)
        return self.read_bytes(n)
