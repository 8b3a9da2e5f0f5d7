import json
from pathlib import Path

import numpy as np
import pytest

from cli.main import main
from spreadnet.config import encode_records
from spreadnet.data.files import read_cases, read_weights


def _truth_table(root: Path) -> None:
    (root / "xor.txt").write_text("4 2 1\n0 0\n0 1\n1 0\n1 1\n0\n1\n1\n0\n")
    with pytest.raises(SystemExit) as info:
        main(["--truth-table", "xor.txt", "in.bin", "out.bin"])
    assert info.value.code == 0


def _settings(**extra):
    values = {
        "learning_rate": 0.3,
        "layer_sizes": [2, 2, 1],
        "population": 0,
        "train": True,
        "min_random": -1.5,
        "max_random": 1.5,
        "error_threshold": 2e-4,
        "max_iterations": 10,
        "print_weights": False,
        "print_truth_table": True,
        "run_after_train": True,
        "save_weights": True,
        "activation": "sigmoid",
        "num_cases": 4,
        "inputs_file": "in.bin",
        "outputs_file": "out.bin",
        "output_weights_file": "trained.bin",
        "keep_alive": 5,
    }
    values.update(extra)
    return values


def test_cli_truth_table_conversion(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _truth_table(tmp_path)
    assert read_cases("out.bin", 4, 1).ravel().tolist() == [0.0, 1.0, 1.0, 0.0]


def test_cli_trains_from_record_stream(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    _truth_table(tmp_path)
    Path("net.bin").write_bytes(encode_records(_settings()))

    main(["net.bin", "--seed", "3", "--metrics-dir", "metrics"])

    out = capsys.readouterr().out
    assert "Configuration file: net.bin" in out
    assert "Weights saved to file trained.bin" in out
    assert len(read_weights("trained.bin", [2, 2, 1])) == 2
    records = [json.loads(line) for line in Path("metrics/metrics.jsonl").read_text().splitlines()]
    assert [r["iteration"] for r in records] == [5, 10]
    assert records[0]["seed"] == 3


def test_cli_runs_default_config(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    _truth_table(tmp_path)
    Path("test.bin").write_bytes(encode_records(_settings(max_iterations=2)))
    main([])
    out = capsys.readouterr().out
    assert "Will use default (test.bin)" in out
    assert "Configuration file: test.bin" in out


def test_cli_missing_config_falls_back_to_default(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    _truth_table(tmp_path)
    Path("test.bin").write_bytes(encode_records(_settings(max_iterations=2)))
    main(["absent.bin"])
    captured = capsys.readouterr()
    assert "Will use default (test.bin)" in captured.err
    assert "Configuration file: test.bin" in captured.out


def test_cli_override_mapping(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _truth_table(tmp_path)
    Path("net.json").write_text(json.dumps(_settings()))
    Path("override.yaml").write_text("max_iterations: 1\noutput_weights_file: other.bin\n")
    main(["net.json", "--override", "override.yaml"])
    assert Path("other.bin").exists()
    assert not Path("trained.bin").exists()


def test_cli_reports_failures(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    Path("net.json").write_text(json.dumps({"learning_rate": 0.3}))
    with pytest.raises(SystemExit) as info:
        main(["net.json"])
    assert info.value.code == 1
    assert "configuration incomplete" in capsys.readouterr().err


def test_cli_weights_round_trip_between_runs(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    _truth_table(tmp_path)
    Path("train.json").write_text(json.dumps(_settings(seed=1)))
    Path("run.json").write_text(
        json.dumps(
            _settings(train=False, population=2, weights_file="trained.bin", save_weights=False)
        )
    )
    main(["train.json", "run.json"])
    out = capsys.readouterr().out
    blocks = out.split("Results from Running:")
    trained_block = blocks[1].split("Configuration file:")[0].strip()
    ran_block = blocks[2].strip()
    assert trained_block == ran_block
    assert np.isfinite(read_weights("trained.bin", [2, 2, 1])[0]).all()


def test_cli_metrics_cover_every_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _truth_table(tmp_path)
    Path("a.bin").write_bytes(encode_records(_settings()))
    Path("b.bin").write_bytes(encode_records(_settings(max_iterations=5)))

    main(["a.bin", "b.bin", "--seed", "3", "--metrics-dir", "metrics"])

    records = [json.loads(line) for line in Path("metrics/metrics.jsonl").read_text().splitlines()]
    assert [r["iteration"] for r in records] == [5, 10, 5]
    rows = Path("metrics/metrics.csv").read_text().splitlines()
    assert rows[0] == "error,iteration,split"
    assert len(rows) == 4


def test_cli_metrics_record_config_seed(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _truth_table(tmp_path)
    Path("a.json").write_text(json.dumps(_settings(seed=11)))
    Path("b.json").write_text(json.dumps(_settings(seed=12, max_iterations=5)))

    main(["a.json", "b.json", "--metrics-dir", "metrics"])

    records = [json.loads(line) for line in Path("metrics/metrics.jsonl").read_text().splitlines()]
    assert [r["seed"] for r in records] == [11, 11, 12]
