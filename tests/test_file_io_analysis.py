"""Tests for file helpers and the end-to-end file analysis."""

import csv
import json
from pathlib import Path

import numpy as np
import pytest

from cable_inspection.core.analysis import analyze_image, analyze_image_file
from cable_inspection.utils.file_io import (
    DEFECT_CSV_FIELDS,
    get_image_files,
    load_image,
    save_batch_summary,
    save_image,
    validate_image_file,
)


def test_analyze_image_file_writes_outputs(image_file, tmp_path):
    out_dir = tmp_path / "out"
    results = analyze_image_file(str(image_file), output_dir=str(out_dir))

    assert results["image_size_px"] == [300, 300]
    assert results["rows_measured"] == 3
    assert results["diameter_px"] == 299.0
    assert results["diameter_min_px"] == results["diameter_max_px"] == 299
    assert results["defect_count"] == 1
    assert results["defect_counts"] == {"pinhole": 1, "cut": 0, "scratch": 0}
    assert results["defects"][0]["label"] == "pinhole"

    for key in ("measure_image", "defect_image", "overlay_image", "defects_csv", "metrics_json"):
        assert Path(results[key]).is_file()
    assert Path(results["metrics_json"]).name == "pinhole_metrics.json"


def test_metrics_json_matches_results(image_file, tmp_path):
    results = analyze_image_file(str(image_file), output_dir=str(tmp_path))

    with open(results["metrics_json"]) as f:
        saved = json.load(f)

    assert saved["defect_counts"] == results["defect_counts"]
    assert saved["measurements"] == results["measurements"]
    assert saved["config"]["area_filter"] == 10_000


def test_defects_csv_has_one_row_per_region(image_file, tmp_path):
    results = analyze_image_file(str(image_file), output_dir=str(tmp_path))

    with open(results["defects_csv"], newline="") as f:
        reader = csv.DictReader(f)
        rows = list(reader)

    assert reader.fieldnames == DEFECT_CSV_FIELDS
    assert len(rows) == 1
    assert rows[0]["label"] == "pinhole"
    assert rows[0]["label_id"] == "0"


def test_no_overlay_and_debug_images(image_file, tmp_path):
    results = analyze_image_file(str(image_file), output_dir=str(tmp_path), no_overlay=True, save_debug=True)

    assert "measure_image" not in results
    assert not (tmp_path / "pinhole_overlay.png").exists()
    names = sorted(Path(p).name for p in results["debug_images"])
    assert names == ["pinhole_edges.png", "pinhole_groups.png", "pinhole_mask.png"]


def test_analyze_image_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        analyze_image_file(str(tmp_path / "missing.png"), output_dir=str(tmp_path))


def test_analyze_image_empty_has_no_overlay():
    analysis = analyze_image(None)

    assert analysis["overlay"] is None
    assert not analysis["measurement"].ok
    assert not analysis["defects"].ok


def test_save_image_rejects_bad_inputs(tmp_path):
    image = np.zeros((10, 10, 3), dtype=np.uint8)

    assert not save_image(None, str(tmp_path / "a.png"))
    assert not save_image(np.zeros((0, 0, 3), dtype=np.uint8), str(tmp_path / "a.png"))
    assert not save_image(image, str(tmp_path / "a.xpm"))
    assert save_image(image, str(tmp_path / "a.bmp"))


def test_load_image_missing_and_garbage(tmp_path):
    garbage = tmp_path / "garbage.jpg"
    garbage.write_bytes(b"\x00\x01\x02")

    assert load_image(str(tmp_path / "missing.png")) is None
    assert load_image(str(garbage)) is None


def test_get_image_files(tmp_path):
    for name in ("b.PNG", "a.jpg", "notes.txt"):
        (tmp_path / name).write_bytes(b"")
    nested = tmp_path / "nested"
    nested.mkdir()
    (nested / "c.bmp").write_bytes(b"")

    assert [Path(p).name for p in get_image_files(str(tmp_path))] == ["a.jpg", "b.PNG"]
    assert len(get_image_files(str(tmp_path), recursive=True)) == 3
    assert get_image_files(str(tmp_path / "absent")) == []


def test_validate_image_file(image_file, tmp_path):
    text = tmp_path / "notes.txt"
    text.write_text("x")

    assert validate_image_file(str(image_file))
    assert not validate_image_file(str(text))
    assert not validate_image_file(str(tmp_path / "missing.png"))


def test_batch_summary_counts(tmp_path):
    path = save_batch_summary([{"diameter_px": np.float64(1.5)}, {"error": "boom"}], str(tmp_path))

    with open(path) as f:
        summary = json.load(f)

    assert summary["total_images"] == 2
    assert summary["successful_analyses"] == 1
    assert summary["failed_analyses"] == 1


def test_batch_summary_rejects_non_scalar_values(tmp_path):
    with pytest.raises(TypeError):
        save_batch_summary([{"mask": np.zeros((2, 2))}], str(tmp_path))
