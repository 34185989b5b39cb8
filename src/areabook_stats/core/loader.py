"""Load cached ``commands`` responses and turn them into people.

Cache layout::

    <cache_dir>/<area id>.json   one commands payload per area
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from tqdm import tqdm

from .errors import EC_INPUT_FORMAT, EC_STORAGE_READ, PipelineError
from .records import CommandsBatch, extract_area_ids
from .timeline import Person, TimelineBuilder

PathLike = Union[str, Path]


def read_json(path: PathLike) -> Any:
    """Read a UTF-8 JSON document.

    Raises:
        PipelineError: the file is unreadable or not valid JSON.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise PipelineError(EC_INPUT_FORMAT, f"{path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise PipelineError(EC_STORAGE_READ, f"failed to read {path}: {exc}") from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise PipelineError(EC_INPUT_FORMAT, f"invalid JSON in {path}: {exc}") from exc


def load_batch(path: PathLike) -> CommandsBatch:
    return CommandsBatch.from_dict(read_json(path))


def load_area_ids(path: PathLike) -> list[int]:
    """Area ids listed in a key-indicators response file."""
    return extract_area_ids(read_json(path))


def batch_path(cache_dir: PathLike, area_id: Union[int, str]) -> Path:
    return Path(cache_dir) / f"{area_id}.json"


def load_people(
    area_ids: Iterable[Union[int, str]],
    cache_dir: PathLike,
    logger: Optional[logging.Logger] = None,
    *,
    builder: Optional[TimelineBuilder] = None,
    progress: bool = True,
) -> list[Person]:
    """Build people for every area whose batch can be loaded.

    An area that fails to load or decode is logged and skipped; its people are
    simply absent from the result.
    """
    logger = logger or logging.getLogger(__name__)
    builder = builder or TimelineBuilder()
    # each area is loaded once
    area_ids = list(dict.fromkeys(str(area_id) for area_id in area_ids))

    people: list[Person] = []
    failed: list[str] = []
    for area_id in tqdm(area_ids, desc="areas", unit="area", disable=not progress):
        path = batch_path(cache_dir, area_id)
        try:
            batch = load_batch(path)
            area_people = builder.build(batch)
        except PipelineError as exc:
            logger.error("%s failed to load area %s: %s", exc.code, area_id, exc.message)
            failed.append(str(area_id))
            continue
        logger.info("area %s (%s): %d people", area_id, batch.area_name, len(area_people))
        people.extend(area_people)

    logger.info(
        "collected %d people from %d/%d areas",
        len(people),
        len(area_ids) - len(failed),
        len(area_ids),
    )
    return people
