"""Tabular views and export of normalized entity tables."""

from pathlib import Path
from typing import Dict, Literal
import pandas as pd

from schemagraph.config.logging import get_logger
from .normalize import NormalizedData

logger = get_logger(__name__)


def to_frames(normalized: NormalizedData) -> Dict[str, pd.DataFrame]:
    """
    Convert entity tables into DataFrames.

    Args:
        normalized: Output of normalize()

    Returns:
        Dictionary mapping schema name to a DataFrame indexed by entity id
    """
    return {
        name: pd.DataFrame(list(table.values()), index=list(table.keys()))
        for name, table in normalized.entities.items()
    }


def write_frames(
    frames: Dict[str, pd.DataFrame],
    out_dir: Path,
    fmt: Literal["json", "csv"] = "json",
) -> Dict[str, Path]:
    """
    Write one file per entity table.

    Args:
        frames: Output of to_frames()
        out_dir: Output directory (created if needed)
        fmt: "json" (records) or "csv"

    Returns:
        Dictionary mapping schema name to the written path
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    written: Dict[str, Path] = {}
    for name, df in frames.items():
        path = out_dir / f"{name}.{fmt}"
        if fmt == "csv":
            df.to_csv(path, index=False)
        else:
            df.to_json(path, orient="records", indent=2)
        written[name] = path
        logger.info(f"Wrote {len(df)} {name} row(s) to {path}")
    return written
