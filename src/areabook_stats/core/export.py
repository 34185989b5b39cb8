"""Output sinks: Key/Value CSV, text summary and per-area bar chart."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .errors import EC_STATS_EMPTY, EC_STORAGE_IO, EC_STORAGE_PERM, PipelineError
from .stats import IntervalStats

PathLike = Union[str, Path]
Row = Tuple[str, Optional[float]]

CSV_COLUMNS = ("Key", "Value")


def _prepare(path: PathLike) -> Path:
    out_path = Path(path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError as exc:
        raise PipelineError(EC_STORAGE_PERM, f"cannot create {out_path.parent}: {exc}") from exc
    return out_path


def write_key_value_csv(rows: Sequence[Row], path: PathLike, *, encoding: str = "utf-8") -> str:
    """Write ``rows`` as a two-column ``Key,Value`` CSV.

    ``None`` values are written as empty cells.

    Raises:
        PipelineError: the file cannot be written.
    """
    out_path = _prepare(path)
    df = pd.DataFrame(list(rows), columns=list(CSV_COLUMNS))
    try:
        df.to_csv(out_path, index=False, encoding=encoding)
    except OSError as exc:
        raise PipelineError(EC_STORAGE_IO, f"failed to save csv: {exc}") from exc
    return str(out_path)


def save_stats_txt(stats: IntervalStats, path: PathLike) -> str:
    """Write a short human readable summary of ``stats``."""

    def fmt(days: Optional[float]) -> str:
        return "no data" if days is None else f"{days:.2f} days"

    lines = [
        f"intervals: {stats.interval_count}\n",
        f"between contacts: {fmt(stats.overall_mean_days)}\n",
    ]
    for area, days in stats.area_rows():
        lines.append(f"  {area}: {fmt(days)}\n")

    out_path = _prepare(path)
    try:
        out_path.write_text("".join(lines), encoding="utf-8")
    except OSError as exc:
        raise PipelineError(EC_STORAGE_IO, f"failed to save stats: {exc}") from exc
    return str(out_path)


def render_area_means_png(
    rows: Sequence[Row],
    path: PathLike,
    *,
    dpi: int = 144,
    width_px: int = 1280,
    height_px: int = 720,
    title: str = "Average days between contacts",
) -> str:
    """Draw a horizontal bar per area with data and save it as PNG.

    Raises:
        PipelineError: no area has data, or the image cannot be written.
    """
    data = [(area, days) for area, days in rows if days is not None]
    if not data:
        raise PipelineError(EC_STATS_EMPTY, "no area has qualifying intervals")

    labels = [area for area, _ in data]
    values = np.array([days for _, days in data], dtype=float)
    y = np.arange(len(labels))

    fig, ax = plt.subplots(figsize=(width_px / dpi, height_px / dpi), dpi=dpi)
    try:
        ax.barh(y, values, color="#1f77b4")
        ax.set_yticks(y)
        ax.set_yticklabels(labels)
        ax.invert_yaxis()
        ax.set_title(title)
        ax.set_xlabel("Days")
        ax.grid(True, axis="x", alpha=0.3)
        fig.tight_layout()

        out_path = _prepare(path)
        fig.savefig(out_path, dpi=dpi, bbox_inches="tight")
        return str(out_path)
    except OSError as exc:
        raise PipelineError(EC_STORAGE_IO, f"failed to save area chart: {exc}") from exc
    finally:
        plt.close(fig)
