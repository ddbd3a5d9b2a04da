from __future__ import annotations

import codecs
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


def project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_path(root: Path, value: str | Path) -> Path:
    path = Path(value)
    return path if path.is_absolute() else (root / path)


class AppSection(BaseModel):
    name: str = "faadof"


class PathsSection(BaseModel):
    raw_dir: Path = Path("data/raw")
    processed_dir: Path = Path("data/processed")


class ParserSection(BaseModel):
    chunk_size: int = Field(default=64 * 1024, gt=0)
    text_encoding: str = "utf-8"

    @field_validator("text_encoding")
    @classmethod
    def validate_encoding(cls, value: str) -> str:
        try:
            return codecs.lookup(value).name
        except LookupError as exc:
            raise ValueError(f"unknown text encoding: {value!r}") from exc


class FaaSection(BaseModel):
    base_url: str = "https://aeronav.faa.gov/Obst_Data"
    archive_name_template: str = "DOF_{yy:02d}{mm:02d}{dd:02d}.zip"
    request_timeout_seconds: int = 60
    max_retries: int = 3
    retry_backoff_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    max_backoff_seconds: float = 60.0
    jitter_seconds: float = 0.0
    respect_retry_after: bool = True
    user_agent: str = "faadof/0.1"

    @field_validator("archive_name_template")
    @classmethod
    def validate_archive_template(cls, value: str) -> str:
        try:
            value.format(yy=25, mm=12, dd=20)
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"archive_name_template must use only {{yy}}, {{mm}}, {{dd}}: {exc}") from exc
        return value


class AppConfig(BaseModel):
    app: AppSection = Field(default_factory=AppSection)
    paths: PathsSection = Field(default_factory=PathsSection)
    parser: ParserSection = Field(default_factory=ParserSection)
    faa: FaaSection = Field(default_factory=FaaSection)

    def resolve_paths(self, root: Optional[Path] = None) -> "AppConfig":
        repo_root = project_root() if root is None else root
        updated_paths = self.paths.model_copy(
            update={
                "raw_dir": _resolve_path(repo_root, self.paths.raw_dir),
                "processed_dir": _resolve_path(repo_root, self.paths.processed_dir),
            }
        )
        return self.model_copy(update={"paths": updated_paths})


def _maybe_load_dotenv() -> None:
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return

    load_dotenv()


def load_config(config_path: str | Path | None = None) -> AppConfig:
    _maybe_load_dotenv()

    root = project_root()
    candidate = config_path or os.getenv("FAADOF_CONFIG", "configs/config.yaml")
    path = _resolve_path(root, candidate)
    if not path.exists():
        path = root / "configs/config.example.yaml"
    if not path.exists():
        return AppConfig().resolve_paths(root)

    data: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return AppConfig.model_validate(data).resolve_paths(root)


_CONFIG: AppConfig | None = None


def get_config() -> AppConfig:
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG
