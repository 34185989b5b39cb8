"""Naming helpers for report outputs."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final

from .errors import EC_STORAGE_KIND, EC_STORAGE_PERM, PipelineError

DEFAULT_RESULT_ROOT: Final[str] = str(Path("areabook_data") / "output")

_KIND_DIR_MAP: Final[dict[str, str]] = {
    "table": "tables",
    "image": "images",
    "text": "reports",
}
_KIND_EXT_MAP: Final[dict[str, str]] = {
    "table": "csv",
    "image": "png",
    "text": "txt",
}


def result_root() -> Path:
    # overridable through the environment
    return Path(os.getenv("AREABOOK_RESULT_ROOT") or DEFAULT_RESULT_ROOT)


def meta_root() -> Path:
    return Path(os.getenv("AREABOOK_META_ROOT") or (result_root() / "meta"))


def _sanitize(text: str) -> str:
    sanitized = re.sub(r"[^0-9A-Za-z._-]+", "-", text.strip())
    sanitized = re.sub(r"-+", "-", sanitized).strip("-")
    return sanitized or "untitled"


def build_basename(window_label: str, filename: str, dt: str, ver: str) -> str:
    """Build a canonical basename: ``<window>-<filename>-<dt>_<ver>``."""

    parts = [_sanitize(window_label), _sanitize(filename), _sanitize(dt)]
    return f"{'-'.join(parts)}_{_sanitize(ver)}"


def result_path(kind: str, basename: str) -> Path:
    """Return the path of an artefact stored under the result root."""

    if kind not in _KIND_DIR_MAP:
        raise PipelineError(EC_STORAGE_KIND, f"unknown artefact kind: {kind}")

    directory = result_root() / _KIND_DIR_MAP[kind]
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except PermissionError as exc:
        raise PipelineError(EC_STORAGE_PERM, f"cannot create {directory}: {exc}") from exc
    return directory / f"{basename}.{_KIND_EXT_MAP[kind]}"


def meta_paths(dt: str) -> dict[str, Path]:
    base_meta = meta_root()
    return {
        "log_path": base_meta / "logs" / f"run_{_sanitize(dt)}.log",
    }
