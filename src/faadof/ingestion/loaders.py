from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol
from urllib.parse import urlparse

from faadof.ingestion.archive import extract_dof_data
from faadof.ingestion.faa_client import FaaDofClient
from faadof.settings import AppConfig, get_config
from faadof.store import ErrorCallback, ObstacleContainer


class DofLoader(Protocol):
    async def load(self, error_callback: Optional[ErrorCallback] = None) -> ObstacleContainer: ...


@dataclass(frozen=True)
class FileLoader:
    """Local `.dat` (streamed in chunks) or `.zip` (extracted in memory)."""

    path: Path
    config: AppConfig

    async def load(self, error_callback: Optional[ErrorCallback] = None) -> ObstacleContainer:
        if self.path.suffix.lower() == ".zip":
            data = await asyncio.to_thread(extract_dof_data, self.path)
            return ObstacleContainer.from_bytes(
                data, error_callback, encoding=self.config.parser.text_encoding
            )
        return await ObstacleContainer.from_path(
            self.path,
            error_callback,
            chunk_size=self.config.parser.chunk_size,
            encoding=self.config.parser.text_encoding,
        )


@dataclass(frozen=True)
class UrlArchiveLoader:
    """Remote `.zip`: download, extract, parse."""

    url: str
    config: AppConfig

    async def load(self, error_callback: Optional[ErrorCallback] = None) -> ObstacleContainer:
        # Download, retry sleeps and extraction all block; keep them off the event loop.
        return await asyncio.to_thread(self._load_blocking, error_callback)

    def _load_blocking(self, error_callback: Optional[ErrorCallback]) -> ObstacleContainer:
        with FaaDofClient(config=self.config) as client:
            return client.load_archive(self.url, error_callback)


@dataclass(frozen=True)
class UrlStreamLoader:
    """Remote uncompressed DOF file, parsed as the body streams in."""

    url: str
    config: AppConfig

    async def load(self, error_callback: Optional[ErrorCallback] = None) -> ObstacleContainer:
        with FaaDofClient(config=self.config) as client:
            return await client.stream_container(self.url, error_callback)


def is_remote(target: str) -> bool:
    return urlparse(target).scheme in {"http", "https"}


def make_loader(target: str, config: Optional[AppConfig] = None) -> DofLoader:
    resolved = config or get_config()
    if not is_remote(target):
        return FileLoader(path=Path(target), config=resolved)
    if urlparse(target).path.lower().endswith(".zip"):
        return UrlArchiveLoader(url=target, config=resolved)
    return UrlStreamLoader(url=target, config=resolved)
