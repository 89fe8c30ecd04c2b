import csv
import json

import pytest

from stepprop.reporting.artifacts import write_manifest
from stepprop.reporting.metrics import CsvSink, JsonlSink
from stepprop.reporting.plots import PLOT_NAME, TrainingPlot, _output_series
from stepprop.reporting.summary import compute_auc, write_summary


def test_jsonl_and_csv_sinks(tmp_path):
    jsonl = JsonlSink(tmp_path / "m.jsonl", run="demo")
    sink = CsvSink(tmp_path / "m.csv")
    for step, err in ((0, 0.3), (1, 0.29), (1000, 0.001)):
        jsonl.on_step(step, {"error": err, "output_0": 0.5})
        sink(step, {"error": err, "output_0": 0.5})

    records = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert [r["step"] for r in records] == [0, 1, 1000]
    assert records[0]["run"] == "demo"

    with (tmp_path / "m.csv").open() as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 3
    assert list(rows[0].keys()) == ["step", "error", "output_0"]


def test_summary_is_deterministic(tmp_path):
    jsonl = JsonlSink(tmp_path / "m.jsonl")
    jsonl.on_step(0, {"error": 0.4})
    jsonl.on_step(10, {"error": 0.2})
    first = write_summary(jsonl.path, tmp_path / "a.json")
    second = write_summary(jsonl.path, tmp_path / "b.json")
    assert (tmp_path / "a.json").read_bytes() == (tmp_path / "b.json").read_bytes()

    summary = json.loads((tmp_path / "a.json").read_text())
    assert first.endswith("a.json") and second.endswith("b.json")
    assert summary["records"] == 2
    assert summary["last_step"] == 10
    error = summary["metrics"]["error"]
    assert error["first"] == 0.4 and error["last"] == 0.2
    assert error["auc"] == pytest.approx(3.0)


def test_compute_auc_implicit_axis():
    assert compute_auc([]) == 0.0
    assert compute_auc([1.0, 1.0, 1.0]) == pytest.approx(2.0)


def test_manifest_records_topology(tmp_path):
    path = write_manifest(tmp_path / "manifest.json", config={"a": 1}, layer_sizes=[2, 3, 1])
    manifest = json.loads((tmp_path / "manifest.json").read_text())
    assert path.endswith("manifest.json")
    assert manifest["topology"] == {"layer_sizes": [2, 3, 1], "parameters": 9}
    assert manifest["config"] == {"a": 1}


def test_training_plot_disabled_is_noop(tmp_path):
    plot = TrainingPlot(tmp_path / "run", [0.01, 0.99], enabled=False)
    plot.on_step(0, {"error": 1.0, "output_0": 0.7})
    assert plot.records == []
    assert plot.close() is None
    assert not (tmp_path / "run").exists()


def test_output_series_groups_by_output_index():
    records = [
        {"error": 0.3, "output_0": 0.75, "output_1": 0.77},
        {"error": 0.2, "output_1": 0.80, "output_0": 0.70},
    ]
    assert _output_series(records) == {0: [0.75, 0.70], 1: [0.77, 0.80]}


def test_training_plot_writes_figure(tmp_path):
    pytest.importorskip("matplotlib")
    plot = TrainingPlot(tmp_path / "run", [0.01, 0.99], enabled=True)
    plot(0, {"error": 0.298, "output_0": 0.751, "output_1": 0.773})
    plot(1, {"error": 0.291, "output_0": 0.742, "output_1": 0.775})
    plot(2, {"error": 0.0, "output_0": 0.01, "output_1": 0.99})
    assert plot.steps == [0, 1, 2]
    path = plot.close()
    assert path == tmp_path / "run" / PLOT_NAME
    assert path.stat().st_size > 0
