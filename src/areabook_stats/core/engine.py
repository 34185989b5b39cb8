"""Run the contact statistics and write every report artefact."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from .errors import PipelineError
from .export import render_area_means_png, save_stats_txt, write_key_value_csv
from .logging_util import get_logger, log_interval_stats, log_summary, log_window
from .naming import build_basename, result_path
from .stats import MIN_GAP_MS, StatsEngine
from .timeline import Person
from .window import StatsWindow


@dataclass
class ReportConfig:
    """Parameters of one report run."""

    window: StatsWindow
    filename: str = "contacts"
    ver: str = "v1"
    dt: Optional[str] = None
    log_path: Optional[Path] = None
    min_gap_ms: int = MIN_GAP_MS
    write_txt: bool = True
    write_png: bool = True
    dpi: int = 144
    width_px: int = 1280
    height_px: int = 720


class IntervalReportEngine:
    """Compute average days between contacts and save CSV/TXT/PNG outputs."""

    def __init__(self, config: ReportConfig):
        self.config = config
        self.dt = config.dt or datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
        self.basename = build_basename(config.window.label, config.filename, self.dt, config.ver)
        self.logger = get_logger(self.dt, log_path=config.log_path)

    def run(self, people: Iterable[Person]) -> Dict[str, Union[str, float, int, None]]:
        """Compute the statistics and save the artefacts.

        Args:
            people: People of every area.

        Returns:
            Paths of the saved artefacts (``None`` when skipped) plus the
            overall mean in days and the number of intervals.

        Raises:
            PipelineError: the window is invalid or the CSV/TXT cannot be saved.
        """
        window = self.config.window
        people = list(people)
        log_window(self.logger, window, len(people))

        stats = StatsEngine(min_gap_ms=self.config.min_gap_ms).run(people, window.start_ms, window.end_ms)
        log_interval_stats(self.logger, window, stats)

        results: Dict[str, Union[str, float, int, None]] = {
            "csv_path": None,
            "txt_path": None,
            "png_path": None,
            "overall_mean_days": stats.overall_mean_days,
            "interval_count": stats.interval_count,
        }

        try:
            results["csv_path"] = write_key_value_csv(stats.area_rows(), result_path("table", self.basename))
            if self.config.write_txt:
                results["txt_path"] = save_stats_txt(stats, result_path("text", self.basename))
        except PipelineError as exc:
            self.logger.error("%s save failed: %s", exc.code, exc.message)
            raise

        if self.config.write_png:
            try:
                results["png_path"] = render_area_means_png(
                    stats.area_rows(),
                    result_path("image", self.basename),
                    dpi=self.config.dpi,
                    width_px=self.config.width_px,
                    height_px=self.config.height_px,
                )
            except PipelineError as exc:
                self.logger.warning("%s area chart skipped: %s", exc.code, exc.message)

        log_summary(
            self.logger,
            window,
            stats,
            {key: results[key] for key in ("csv_path", "txt_path", "png_path")},
        )
        return results
