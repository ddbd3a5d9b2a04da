"""FAA DOF download client.

Fetches published DOF archives from the FAA obstacle data site and hands the bytes to the parser.
Two paths exist:
- archive download (`load_archive`): GET the whole ZIP with retries, keep a copy under
  `paths.raw_dir`, extract DOF.DAT, parse in memory;
- streaming (`stream_container`): GET an uncompressed DOF file and parse it line by line as the
  response body arrives, without holding the whole file.

Retry/backoff behavior is config-driven (`faa.*` in configs/config.yaml).
"""

from __future__ import annotations

import logging
import random
import time
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import urlparse

import httpx

from faadof.cycle import Cycle
from faadof.ingestion.archive import extract_dof_data
from faadof.settings import AppConfig, get_config
from faadof.store import ErrorCallback, ObstacleContainer

logger = logging.getLogger(__name__)


class FaaClientError(RuntimeError):
    """Raised when a download fails after retries."""


class DownloadFailedError(FaaClientError):
    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"Download failed with status code: {status_code} ({url})")


class FaaDofClient:
    """Download DOF archives and stream DOF files from the FAA.

    Resource lifetime:
    - The client owns its `httpx.Client` unless one is injected; call `close()` when done.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        http_client: Optional[httpx.Client] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or get_config()
        self._headers = {"user-agent": self.config.faa.user_agent}
        self._http = http_client or httpx.Client(
            timeout=self.config.faa.request_timeout_seconds,
            headers=self._headers,
            follow_redirects=True,
        )
        self._async_transport = async_transport

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "FaaDofClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def cycle_archive_url(self, cycle: Optional[Cycle] = None) -> str:
        """URL of the archive published for `cycle` (default: the current cycle).

        FAA names archives after the last day of data coverage, e.g. DOF_251220.zip for the cycle
        starting 2025-12-21.
        """

        resolved = cycle or Cycle.current()
        last = resolved.last_date
        if last is None:
            raise ValueError(f"Cycle {resolved} is not a calendar date; it has no archive.")
        name = self.config.faa.archive_name_template.format(
            yy=last.year % 100, mm=last.month, dd=last.day
        )
        return f"{self.config.faa.base_url.rstrip('/')}/{name}"

    def download_archive(self, url: str) -> bytes:
        """GET `url` and return the body, retrying transient failures."""

        max_retries = max(0, int(self.config.faa.max_retries))
        last_error: Optional[Exception] = None
        for attempt in range(max_retries + 1):
            try:
                response = self._http.get(url)
                response.raise_for_status()
                return response.content
            except httpx.HTTPStatusError as exc:
                last_error = exc
                status = int(exc.response.status_code)
                if not self._is_retryable_status(status) or attempt >= max_retries:
                    raise DownloadFailedError(status, url) from exc
                delay = self._compute_backoff_seconds(
                    attempt=attempt,
                    retry_after_seconds=self._parse_retry_after_seconds(
                        exc.response.headers.get("retry-after")
                    ),
                )
                logger.warning(
                    "DOF download failed (%s). Retrying in %.2fs (attempt %s/%s).",
                    status,
                    delay,
                    attempt + 1,
                    max_retries,
                )
                time.sleep(delay)
            except httpx.TransportError as exc:
                last_error = exc
                if attempt >= max_retries:
                    break
                delay = self._compute_backoff_seconds(attempt=attempt, retry_after_seconds=None)
                logger.warning(
                    "DOF download error (%s). Retrying in %.2fs (attempt %s/%s).",
                    type(exc).__name__,
                    delay,
                    attempt + 1,
                    max_retries,
                )
                time.sleep(delay)

        raise FaaClientError(f"DOF download failed after retries: {last_error}") from last_error

    def save_archive(self, url: str, body: bytes) -> Path:
        """Keep a copy of a downloaded archive under `paths.raw_dir`, named after the URL."""

        name = PurePosixPath(urlparse(url).path).name or "DOF.zip"
        target = self.config.paths.raw_dir / name
        target.parent.mkdir(parents=True, exist_ok=True)
        partial = target.with_name(target.name + ".part")
        partial.write_bytes(body)
        partial.replace(target)
        logger.info("Saved DOF archive to %s (%s bytes).", target, len(body))
        return target

    def load_archive(
        self, url: str, error_callback: Optional[ErrorCallback] = None
    ) -> ObstacleContainer:
        body = self.download_archive(url)
        self.save_archive(url, body)
        data = extract_dof_data(body)
        return ObstacleContainer.from_bytes(
            data, error_callback, encoding=self.config.parser.text_encoding
        )

    async def stream_container(
        self, url: str, error_callback: Optional[ErrorCallback] = None
    ) -> ObstacleContainer:
        """Parse an uncompressed DOF file while it downloads. No retries: a body cannot be resumed."""

        async with httpx.AsyncClient(
            timeout=self.config.faa.request_timeout_seconds,
            headers=self._headers,
            follow_redirects=True,
            transport=self._async_transport,
        ) as client:
            async with client.stream("GET", url) as response:
                if response.status_code != 200:
                    raise DownloadFailedError(response.status_code, url)
                return await ObstacleContainer.from_stream(
                    response.aiter_bytes(),
                    error_callback,
                    encoding=self.config.parser.text_encoding,
                )

    @staticmethod
    def _parse_retry_after_seconds(value: Optional[str]) -> Optional[float]:
        if not value:
            return None
        try:
            seconds = float(value.strip())
        except ValueError:
            return None
        return seconds if seconds >= 0 else None

    def _compute_backoff_seconds(self, attempt: int, retry_after_seconds: Optional[float]) -> float:
        faa = self.config.faa
        delay = float(faa.retry_backoff_seconds) * (float(faa.backoff_multiplier) ** attempt)
        delay = min(float(faa.max_backoff_seconds), max(0.0, delay))
        if faa.jitter_seconds > 0:
            delay += random.uniform(0.0, float(faa.jitter_seconds))
        if faa.respect_retry_after and retry_after_seconds is not None:
            delay = max(delay, retry_after_seconds)
        return delay

    @staticmethod
    def _is_retryable_status(status_code: int) -> bool:
        return status_code in {408, 429, 500, 502, 503, 504}
