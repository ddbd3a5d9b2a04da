from __future__ import annotations

from pathlib import Path

import pandas as pd

from faadof.cycle import Cycle
from faadof.store import ObstacleContainer

OBSTACLE_COLUMNS: tuple[str, ...] = (
    "oas_number",
    "verification_status",
    "country",
    "state",
    "city",
    "latitude_deg",
    "longitude_deg",
    "obstacle_type",
    "quantity",
    "height_ft_agl",
    "height_ft_msl",
    "lighting",
    "horizontal_accuracy",
    "marking",
    "study_number",
    "action",
    "last_updated_year",
    "last_updated_day",
)


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def obstacles_csv_path(processed_dir: Path, cycle: Cycle) -> Path:
    return processed_dir / f"obstacles_{cycle.id}.csv"


def obstacles_frame(container: ObstacleContainer) -> pd.DataFrame:
    """Flatten a container into one row per obstacle, sorted by OAS number.

    Enum columns hold the raw one-letter DOF codes.
    """

    rows = []
    for obstacle in container:
        row = obstacle.model_dump(mode="json", exclude={"last_updated"})
        row["last_updated_year"] = obstacle.last_updated.year
        row["last_updated_day"] = obstacle.last_updated.day_of_year
        rows.append(row)
    df = pd.DataFrame(rows, columns=list(OBSTACLE_COLUMNS))
    if df.empty:
        return df
    return df.sort_values("oas_number").reset_index(drop=True)


def save_csv(df: pd.DataFrame, path: Path) -> Path:
    ensure_parent_dir(path)
    df.to_csv(path, index=False)
    return path


def load_csv(path: Path) -> pd.DataFrame:
    # OAS numbers and study numbers look numeric in places; keep them as text.
    return pd.read_csv(path, dtype={"oas_number": str, "study_number": str, "state": str})
