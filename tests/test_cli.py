"""Tests for the command line entry points."""

import json
import sys

import cv2
import pandas as pd
import pytest

from cable_inspection.cli import analyze, summarize


def run(monkeypatch, module, *argv):
    monkeypatch.setattr(sys, "argv", [module.__name__, *argv])
    module.main()


def test_analyze_single_image_quiet_prints_json(monkeypatch, capsys, image_file, tmp_path):
    out_dir = tmp_path / "out"
    run(monkeypatch, analyze, str(image_file), "--out-dir", str(out_dir), "--quiet")

    results = json.loads(capsys.readouterr().out)
    assert results["defect_counts"]["pinhole"] == 1
    assert (out_dir / "pinhole_metrics.json").is_file()


def test_analyze_directory_writes_batch_summary(monkeypatch, image_file, scratch_image, tmp_path):
    cv2.imwrite(str(image_file.parent / "scratch.png"), scratch_image)
    out_dir = tmp_path / "results"
    run(monkeypatch, analyze, str(image_file.parent), "--out-dir", str(out_dir))

    with open(out_dir / "batch_summary.json") as f:
        summary = json.load(f)
    assert summary["total_images"] == 2
    assert summary["failed_analyses"] == 0


def test_analyze_overrides_and_saved_config(monkeypatch, image_file, tmp_path):
    config_path = tmp_path / "config.json"
    run(
        monkeypatch,
        analyze,
        str(image_file),
        "--out-dir",
        str(tmp_path / "out"),
        "--area-filter",
        "50",
        "--save-config",
        str(config_path),
        "--quiet",
    )

    with open(config_path) as f:
        assert json.load(f)["area_filter"] == 50
    with open(tmp_path / "out" / "pinhole_metrics.json") as f:
        assert json.load(f)["defect_count"] == 0


def test_analyze_missing_image_exits(monkeypatch, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        run(monkeypatch, analyze, str(tmp_path / "missing.png"), "--out-dir", str(tmp_path))

    assert excinfo.value.code == 1


@pytest.mark.parametrize(
    "data",
    [
        {"not_a_field": 1},
        {"morph_kernel": 3},
        {"blur_kernel": "3"},
        {"overlay_color": None},
    ],
)
def test_analyze_invalid_config_exits(monkeypatch, capsys, image_file, tmp_path, data):
    config_path = tmp_path / "bad.json"
    config_path.write_text(json.dumps(data))

    with pytest.raises(SystemExit) as excinfo:
        run(monkeypatch, analyze, str(image_file), "--config", str(config_path))

    assert excinfo.value.code == 1
    assert "Invalid configuration" in capsys.readouterr().out


def test_summarize_writes_csv_and_plots(monkeypatch, image_file, tmp_path):
    results_dir = tmp_path / "results"
    run(monkeypatch, analyze, str(image_file), "--out-dir", str(results_dir), "--quiet")
    run(monkeypatch, summarize, "--in-dir", str(results_dir), "--out-dir", str(results_dir), "--make-plots")

    df = pd.read_csv(results_dir / "summary.csv")
    assert len(df) == 1
    assert df.loc[0, "pinhole_count"] == 1
    assert df.loc[0, "diameter_px"] == 299.0
    assert (results_dir / "plots" / "diameter_histogram.png").is_file()
    assert (results_dir / "plots" / "defect_classes.png").is_file()


def test_summarize_missing_dir_exits(monkeypatch, tmp_path):
    with pytest.raises(SystemExit):
        run(monkeypatch, summarize, "--in-dir", str(tmp_path / "absent"))


def test_summarize_empty_dir(monkeypatch, capsys, tmp_path):
    run(monkeypatch, summarize, "--in-dir", str(tmp_path), "--out-dir", str(tmp_path))

    assert "No *_metrics.json files" in capsys.readouterr().out
    assert not (tmp_path / "summary.csv").exists()
