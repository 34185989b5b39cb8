from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from areabook_stats.core.errors import EC_INPUT_FORMAT, EC_STORAGE_READ, PipelineError
from areabook_stats.core.loader import load_area_ids, load_batch, load_people


def _write(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_load_batch(tmp_path: Path, make_payload) -> None:
    batch = load_batch(_write(tmp_path / "7.json", make_payload(area="North")))
    assert batch.area_name == "North"


def test_load_batch_missing_file(tmp_path: Path) -> None:
    with pytest.raises(PipelineError) as ei:
        load_batch(tmp_path / "nope.json")
    assert ei.value.code == EC_STORAGE_READ


def test_load_batch_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(PipelineError) as ei:
        load_batch(path)
    assert ei.value.code == EC_INPUT_FORMAT


def test_load_area_ids(tmp_path: Path) -> None:
    path = _write(tmp_path / "kics.json", {"areaKeyIndicators": [{"prosAreaId": 7}, {"prosAreaId": 8}]})
    assert load_area_ids(path) == [7, 8]


def test_load_people_skips_failing_areas(tmp_path: Path, make_payload, caplog) -> None:
    """A broken or missing area is logged and left out; the others load."""
    _write(tmp_path / "1.json", make_payload(area="North"))
    _write(tmp_path / "2.json", make_payload(area="South"))
    broken = make_payload(area="West")
    del broken["contacts"]
    _write(tmp_path / "3.json", broken)

    logger = logging.getLogger("areabook_stats.test_loader")
    with caplog.at_level(logging.INFO, logger="areabook_stats.test_loader"):
        people = load_people([1, 2, 3, 4], tmp_path, logger, progress=False)

    assert sorted({p.area for p in people}) == ["North", "South"]
    assert len(people) == 4
    assert "failed to load area 3" in caplog.text
    assert "failed to load area 4" in caplog.text


def test_invalid_utf8_is_a_format_error(tmp_path: Path) -> None:
    path = tmp_path / "2.json"
    path.write_bytes(b'{"prosAreaName": "\xff\xfe"}')
    with pytest.raises(PipelineError) as ei:
        load_batch(path)
    assert ei.value.code == EC_INPUT_FORMAT


def test_load_people_skips_area_with_invalid_utf8(tmp_path: Path, make_payload, caplog) -> None:
    _write(tmp_path / "1.json", make_payload(area="North"))
    (tmp_path / "2.json").write_bytes(b'{"prosAreaName": "\xff\xfe"}')

    logger = logging.getLogger("areabook_stats.test_loader_utf8")
    with caplog.at_level(logging.INFO, logger="areabook_stats.test_loader_utf8"):
        people = load_people([1, 2], tmp_path, logger, progress=False)

    assert {p.area for p in people} == {"North"}
    assert "failed to load area 2" in caplog.text


def test_load_people_loads_each_area_once(tmp_path: Path, make_payload) -> None:
    _write(tmp_path / "11.json", make_payload(area="North"))
    people = load_people([11, "11", 11], tmp_path, progress=False)
    assert len(people) == 2
