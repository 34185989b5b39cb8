"""Logging for report runs: one logger per run, plus IntervalStats summaries."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Optional

from . import naming
from .stats import IntervalStats
from .window import StatsWindow

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _days(value: Optional[float]) -> str:
    return "no data" if value is None else f"{value:.2f} days"


def get_logger(
    run_id: str,
    *,
    log_path: Optional[Path] = None,
    level: int = logging.INFO,
    console: bool = True,
) -> logging.Logger:
    """Return the logger of report run ``run_id``.

    The log file defaults to ``<meta root>/logs/run_<run_id>.log``. A logger
    that already has handlers is returned unchanged.
    """
    logger = logging.getLogger(f"areabook_stats.report.{run_id}")
    if logger.handlers:
        return logger

    log_path = Path(log_path) if log_path is not None else naming.meta_paths(run_id)["log_path"]
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = [logging.FileHandler(log_path, encoding="utf-8")]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    return logger


def log_window(logger: logging.Logger, window: StatsWindow, people_count: int) -> None:
    logger.info(
        "window %s [%d, %d]: %d people",
        window.label,
        window.start_ms,
        window.end_ms,
        people_count,
    )


def log_interval_stats(logger: logging.Logger, window: StatsWindow, stats: IntervalStats) -> None:
    """Log the overall mean and one line per area."""

    if stats.overall_mean_days is None:
        logger.warning("no qualifying intervals in window %s", window.label)
    else:
        logger.info(
            "%s between contacts over %d intervals",
            _days(stats.overall_mean_days),
            stats.interval_count,
        )
    for area, days in stats.area_rows():
        logger.info("  %s: %s", area, _days(days))


def log_summary(
    logger: logging.Logger,
    window: StatsWindow,
    stats: IntervalStats,
    artefacts: Mapping[str, Optional[str]],
) -> None:
    """Output one multi-line summary of a finished run."""

    rows = stats.area_rows()
    no_data = sum(1 for _, days in rows if days is None)
    lines = [
        "=== run summary ===",
        f"window: {window.label} [{window.start_ms}, {window.end_ms}]",
        f"intervals: {stats.interval_count}",
        f"between contacts: {_days(stats.overall_mean_days)}",
        f"areas: {len(rows)} ({no_data} without data)",
    ]
    for name, path in artefacts.items():
        lines.append(f"{name}: {path if path is not None else 'skipped'}")
    logger.info("\n".join(lines))
