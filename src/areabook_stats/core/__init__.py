"""Core API: batch decoding, timelines, contact statistics and reports."""

from .errors import PipelineError
from .records import CommandsBatch, extract_area_ids
from .timeline import Person, TimelineBuilder, TimelineEntry, TimelineEventKind, build_people, timeline_frame
from .stats import MIN_GAP_MS, MILLIS_IN_DAY, IntervalStats, StatsEngine, average_contact_time
from .window import StatsWindow
from .loader import load_area_ids, load_batch, load_people
from .export import render_area_means_png, save_stats_txt, write_key_value_csv
from .engine import IntervalReportEngine, ReportConfig

__all__ = [
    "PipelineError",
    "CommandsBatch",
    "extract_area_ids",
    "Person",
    "TimelineBuilder",
    "TimelineEntry",
    "TimelineEventKind",
    "build_people",
    "timeline_frame",
    "MIN_GAP_MS",
    "MILLIS_IN_DAY",
    "IntervalStats",
    "StatsEngine",
    "average_contact_time",
    "StatsWindow",
    "load_area_ids",
    "load_batch",
    "load_people",
    "render_area_means_png",
    "save_stats_txt",
    "write_key_value_csv",
    "IntervalReportEngine",
    "ReportConfig",
]
