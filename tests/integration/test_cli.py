import json
from pathlib import Path

import pytest

from cli.main import main


def _last_json_line(out: str) -> dict:
    return json.loads(out.strip().splitlines()[-1])


def test_cli_basic_preset(tmp_path, capsys):
    run_dir = tmp_path / "run"
    main(["--preset", "mazur-2-2-2", "--steps", "20", "--run-dir", str(run_dir), "--quiet"])
    payload = _last_json_line(capsys.readouterr().out)
    assert payload["steps"] == 20
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()


def test_cli_overrides_and_dump(tmp_path, capsys):
    dump = tmp_path / "resolved.json"
    main(
        [
            "--learning-rate",
            "0.25",
            "--train-bias",
            "--steps",
            "5",
            "--report-every",
            "2",
            "--run-dir",
            str(tmp_path / "run"),
            "--dump-config",
            str(dump),
        ]
    )
    out = capsys.readouterr().out
    assert "=== stepprop run ===" in out
    resolved = json.loads(dump.read_text())
    assert resolved["model"]["learning_rate"] == 0.25
    assert resolved["model"]["train_bias"] is True
    assert resolved["train"]["report_every"] == 2


def test_cli_partial_config_override(tmp_path, capsys):
    override = tmp_path / "override.json"
    override.write_text(json.dumps({"model": {"activation": "tanh"}, "train": {"steps": 3}}))
    run_dir = tmp_path / "run"
    main(["--config", str(override), "--run-dir", str(run_dir), "--quiet"])
    _last_json_line(capsys.readouterr().out)
    config = json.loads((run_dir / "config.json").read_text())
    assert config["model"]["activation"] == "tanh"
    assert config["model"]["learning_rate"] == 0.5


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--list-presets"])
    assert excinfo.value.code == 0
    names = capsys.readouterr().out.split()
    assert "mazur-2-2-2" in names
    assert "mazur-2-2-2-tanh" in names


def test_cli_plots(tmp_path, capsys):
    pytest.importorskip("matplotlib")
    run_dir = tmp_path / "run"
    main(["--steps", "10", "--run-dir", str(run_dir), "--quiet", "--enable-plots"])
    capsys.readouterr()
    assert Path(run_dir / "training.png").exists()
