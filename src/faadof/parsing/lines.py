"""Line sources for DOF data.

Every source yields raw `bytes` lines with the same boundaries for the same input bytes:
- a line ends at LF (0x0A); one trailing CR (0x0D) is stripped;
- a final fragment without a trailing LF is yielded only when it is non-empty;
- bytes are never decoded here.

Three origins are supported:
- `iter_buffer_lines`: a fully materialized buffer (synchronous, never suspends).
- `FileLineSource`: a local file read in fixed-size chunks (async; reads run off the event loop).
- `StreamLineSource`: any async iterable of byte chunks, e.g. `httpx.Response.aiter_bytes()`.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterable, AsyncIterator, Iterator
from pathlib import Path
from typing import BinaryIO, Optional, Union

from faadof.parsing.errors import DofStreamError

LF = 0x0A
CR = 0x0D
DEFAULT_CHUNK_SIZE = 64 * 1024

_LF = b"\n"
_CR = b"\r"


def _strip_cr(line: bytes) -> bytes:
    return line[:-1] if line.endswith(_CR) else line


def iter_buffer_lines(data: Union[bytes, bytearray, memoryview]) -> Iterator[bytes]:
    """Yield lines from an in-memory buffer without materializing a list of all lines."""

    buffer = data if isinstance(data, (bytes, bytearray)) else bytes(data)
    position = 0
    end = len(buffer)
    while position < end:
        newline = buffer.find(_LF, position)
        if newline < 0:
            yield _strip_cr(bytes(buffer[position:]))
            return
        yield _strip_cr(bytes(buffer[position:newline]))
        position = newline + 1


class LineAssembler:
    """Incremental line splitter shared by the chunked sources.

    `feed` accepts chunks of any size (a line may span many chunks, or a chunk may hold many lines)
    and yields each completed line; `finish` returns the trailing unterminated fragment, if any.
    """

    def __init__(self) -> None:
        self._pending = bytearray()

    def feed(self, chunk: bytes) -> Iterator[bytes]:
        position = 0
        while True:
            newline = chunk.find(_LF, position)
            if newline < 0:
                self._pending += chunk[position:]
                return
            if self._pending:
                self._pending += chunk[position:newline]
                line = bytes(self._pending)
                self._pending.clear()
            else:
                line = bytes(chunk[position:newline])
            yield _strip_cr(line)
            position = newline + 1

    def finish(self) -> Optional[bytes]:
        if not self._pending:
            return None
        line = _strip_cr(bytes(self._pending))
        self._pending.clear()
        return line


class FileLineSource:
    """Async line iterator over a local file, read in `chunk_size` pieces.

    The file is opened on first iteration and closed at end of data, on error, or via `aclose()`.
    Any `OSError` while opening or reading is raised as `DofStreamError`.
    """

    def __init__(self, path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        self.path = Path(path)
        self.chunk_size = chunk_size
        self._handle: Optional[BinaryIO] = None
        self._assembler = LineAssembler()
        self._ready: Iterator[bytes] = iter(())
        self._eof = False

    def __aiter__(self) -> "FileLineSource":
        return self

    async def __anext__(self) -> bytes:
        while True:
            line = next(self._ready, None)
            if line is not None:
                return line
            if self._eof:
                raise StopAsyncIteration
            chunk = await self._read_chunk()
            if not chunk:
                self._eof = True
                await self.aclose()
                tail = self._assembler.finish()
                if tail is not None:
                    return tail
                raise StopAsyncIteration
            self._ready = self._assembler.feed(chunk)

    async def _read_chunk(self) -> bytes:
        try:
            if self._handle is None:
                self._handle = await asyncio.to_thread(open, self.path, "rb")
            return await asyncio.to_thread(self._handle.read, self.chunk_size)
        except OSError as exc:
            self._eof = True
            await self.aclose()
            raise DofStreamError(exc) from exc

    async def aclose(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()


class StreamLineSource:
    """Async line iterator driven by an arbitrary async byte source.

    The source may yield `bytes` chunks of any size or single byte values (`int`). Any exception
    raised by the source is re-raised as `DofStreamError`.
    """

    def __init__(self, source: AsyncIterable[Union[bytes, int]]) -> None:
        self._source: AsyncIterator[Union[bytes, int]] = source.__aiter__()
        self._assembler = LineAssembler()
        self._ready: Iterator[bytes] = iter(())
        self._eof = False

    def __aiter__(self) -> "StreamLineSource":
        return self

    async def __anext__(self) -> bytes:
        while True:
            line = next(self._ready, None)
            if line is not None:
                return line
            if self._eof:
                raise StopAsyncIteration
            try:
                chunk = await self._source.__anext__()
            except StopAsyncIteration:
                self._eof = True
                tail = self._assembler.finish()
                if tail is not None:
                    return tail
                raise
            except Exception as exc:  # noqa: BLE001 - any source failure ends the stream
                self._eof = True
                raise DofStreamError(exc) from exc
            if isinstance(chunk, int):
                chunk = bytes((chunk,))
            self._ready = self._assembler.feed(chunk)
