from __future__ import annotations

import json
from typing import Protocol, TextIO

from faadof.storage.datasets import obstacles_frame
from faadof.store import ObstacleContainer


class OutputFormatter(Protocol):
    def format(
        self, container: ObstacleContainer, error_count: int, elapsed_seconds: float, stream: TextIO
    ) -> None: ...


class SummaryFormatter:
    def format(
        self, container: ObstacleContainer, error_count: int, elapsed_seconds: float, stream: TextIO
    ) -> None:
        stream.write(f"Cycle: {container.cycle}\n")
        stream.write(f"Total obstacles: {len(container):,}\n")
        stream.write(f"Parse errors: {error_count:,}\n")
        stream.write(f"Elapsed: {elapsed_seconds:.2f}s\n")


class JsonFormatter:
    """Pretty-printed JSON array of obstacles with sorted keys, ordered by OAS number."""

    def format(
        self, container: ObstacleContainer, error_count: int, elapsed_seconds: float, stream: TextIO
    ) -> None:
        records = [
            obstacle.model_dump(mode="json")
            for obstacle in sorted(container, key=lambda item: item.oas_number)
        ]
        json.dump(records, stream, indent=2, sort_keys=True, ensure_ascii=False)
        stream.write("\n")


class CsvFormatter:
    def format(
        self, container: ObstacleContainer, error_count: int, elapsed_seconds: float, stream: TextIO
    ) -> None:
        obstacles_frame(container).to_csv(stream, index=False)


FORMATTERS: dict[str, type] = {
    "summary": SummaryFormatter,
    "json": JsonFormatter,
    "csv": CsvFormatter,
}


def make_formatter(name: str) -> OutputFormatter:
    try:
        return FORMATTERS[name]()
    except KeyError:
        raise ValueError(f"Unknown output format: {name!r} (expected one of {sorted(FORMATTERS)})") from None
