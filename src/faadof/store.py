"""Assemble parsed DOF records into an `ObstacleContainer`.

Line handling is positional:
- line 1 carries the currency date and fixes the container's cycle (errors here are fatal);
- lines 2-4 are column headers and are skipped unconditionally;
- afterwards empty lines and separator lines (first byte `-`) are skipped and every other line
  is parsed as a record.

A record line that fails to parse is reported to the optional error callback with its 1-based
line number and dropped; the pass continues. Records are keyed by OAS number and a later line
with the same OAS number replaces the earlier one.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, Callable, Iterable, Iterator, Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Union

from faadof.cycle import Cycle
from faadof.models import Obstacle
from faadof.parsing.errors import LINE_ERRORS, DofError, DofStreamError, MissingCurrencyDateError
from faadof.parsing.lines import (
    DEFAULT_CHUNK_SIZE,
    FileLineSource,
    StreamLineSource,
    iter_buffer_lines,
)
from faadof.parsing.record import DEFAULT_TEXT_ENCODING, parse_currency_date, parse_line

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[DofError, int], None]

HEADER_LINE_COUNT = 4
SEPARATOR_BYTE = 0x2D


class ObstacleStore:
    """Single-pass accumulator: feed lines in file order, then call `finish()`.

    All state is local to one instance, so independent parses can run concurrently.
    """

    def __init__(
        self,
        error_callback: Optional[ErrorCallback] = None,
        *,
        encoding: str = DEFAULT_TEXT_ENCODING,
    ) -> None:
        self.error_callback = error_callback
        self.encoding = encoding
        self.line_number = 0
        self.cycle: Optional[Cycle] = None
        self.error_count = 0
        self._obstacles: dict[str, Obstacle] = {}

    def feed(self, line: bytes) -> None:
        self.line_number += 1
        line_number = self.line_number

        if line_number == 1:
            self.cycle = parse_currency_date(line)
            return
        if line_number <= HEADER_LINE_COUNT:
            return
        if not line or line[0] == SEPARATOR_BYTE:
            return

        try:
            obstacle = parse_line(line, line_number, encoding=self.encoding)
        except LINE_ERRORS as exc:
            self.error_count += 1
            if self.error_callback is not None:
                self.error_callback(exc, line_number)
            else:
                logger.debug("Dropped DOF line %s: %s", line_number, exc)
            return
        self._obstacles[obstacle.oas_number] = obstacle

    def feed_all(self, lines: Iterable[bytes]) -> "ObstacleStore":
        for line in lines:
            self.feed(line)
        return self

    async def feed_async(self, lines: AsyncIterable[bytes]) -> "ObstacleStore":
        async for line in lines:
            self.feed(line)
        return self

    def finish(self) -> "ObstacleContainer":
        if self.cycle is None:
            raise MissingCurrencyDateError()
        container = ObstacleContainer(self.cycle, self._obstacles, error_count=self.error_count)
        logger.info(
            "Parsed DOF cycle %s: %s obstacles from %s lines (%s dropped).",
            self.cycle,
            len(container),
            self.line_number,
            self.error_count,
        )
        return container


class ObstacleContainer:
    """Obstacles of one DOF publication, keyed by OAS number. Read-only once built."""

    def __init__(
        self,
        cycle: Cycle,
        obstacles: Mapping[str, Obstacle],
        *,
        error_count: int = 0,
    ) -> None:
        self.cycle = cycle
        self.error_count = error_count
        self._by_id: Mapping[str, Obstacle] = MappingProxyType(dict(obstacles))

    # Constructors

    @classmethod
    def from_bytes(
        cls,
        data: Union[bytes, bytearray, memoryview],
        error_callback: Optional[ErrorCallback] = None,
        *,
        encoding: str = DEFAULT_TEXT_ENCODING,
    ) -> "ObstacleContainer":
        store = ObstacleStore(error_callback, encoding=encoding)
        return store.feed_all(iter_buffer_lines(data)).finish()

    @classmethod
    def load_path(
        cls,
        path: Union[str, Path],
        error_callback: Optional[ErrorCallback] = None,
        *,
        encoding: str = DEFAULT_TEXT_ENCODING,
    ) -> "ObstacleContainer":
        """Read a whole file into memory and parse it (synchronous).

        A read failure is raised as `DofStreamError`, the same as `from_path`.
        """

        try:
            data = Path(path).read_bytes()
        except OSError as exc:
            raise DofStreamError(exc) from exc
        return cls.from_bytes(data, error_callback, encoding=encoding)

    @classmethod
    async def from_path(
        cls,
        path: Union[str, Path],
        error_callback: Optional[ErrorCallback] = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        encoding: str = DEFAULT_TEXT_ENCODING,
    ) -> "ObstacleContainer":
        """Stream a local file in chunks and parse it."""

        source = FileLineSource(path, chunk_size=chunk_size)
        try:
            store = await ObstacleStore(error_callback, encoding=encoding).feed_async(source)
        finally:
            await source.aclose()
        return store.finish()

    @classmethod
    async def from_stream(
        cls,
        source: AsyncIterable[Union[bytes, int]],
        error_callback: Optional[ErrorCallback] = None,
        *,
        encoding: str = DEFAULT_TEXT_ENCODING,
    ) -> "ObstacleContainer":
        """Parse DOF data from any async byte source (e.g. an HTTP response body)."""

        store = ObstacleStore(error_callback, encoding=encoding)
        await store.feed_async(StreamLineSource(source))
        return store.finish()

    # Lookup

    def obstacle(self, oas_number: str) -> Optional[Obstacle]:
        return self._by_id.get(oas_number)

    def obstacles_in(self, state: str) -> list[Obstacle]:
        return [obstacle for obstacle in self._by_id.values() if obstacle.state == state]

    def all(self) -> list[Obstacle]:
        return list(self._by_id.values())

    @property
    def by_id(self) -> Mapping[str, Obstacle]:
        return self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Obstacle]:
        return iter(self._by_id.values())

    def __contains__(self, oas_number: object) -> bool:
        return oas_number in self._by_id

    def __repr__(self) -> str:
        return f"ObstacleContainer(cycle={self.cycle}, obstacles={len(self)})"
