from __future__ import annotations

import logging.config
import os
from pathlib import Path
from typing import Any

import yaml

from faadof.settings import project_root


def _default_logging_config(level: str) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s"}
        },
        "handlers": {
            # stdout carries parse output (JSON/CSV), so logs always go to stderr.
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            }
        },
        "loggers": {
            "httpx": {"level": "WARNING"},
            "httpcore": {"level": "WARNING"},
        },
        "root": {"level": level, "handlers": ["console"]},
    }


def configure_logging(
    logging_config_path: str | Path | None = None, level: str | None = None
) -> None:
    """Configure logging from `configs/logging.yaml` (or FAADOF_LOGGING_CONFIG) or stderr defaults.

    `level` overrides the root level in either case (scripts pass their `--log-level`).
    """

    candidate = logging_config_path or os.getenv("FAADOF_LOGGING_CONFIG", "configs/logging.yaml")
    path = Path(candidate)
    if not path.is_absolute():
        path = project_root() / path

    if path.exists():
        config: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        config = _default_logging_config(level or "INFO")

    if level is not None:
        config.setdefault("root", {})["level"] = level
    logging.config.dictConfig(config)
