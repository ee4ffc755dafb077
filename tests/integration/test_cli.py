import csv
import io
import json

import numpy as np
import pytest

from cli.main import main
from starseed_nn.models import load_artifact


def _write_dataset(path, n=24, seed=0):
    rng = np.random.default_rng(seed)
    lines = []
    for _ in range(n):
        x = rng.standard_normal(4)
        y = [float(x[0] - x[1])]
        lines.append(json.dumps({"x": x.tolist(), "y": y}))
    path.write_text("\n".join(lines) + "\n")
    return path


def test_cli_train_then_infer(tmp_path, capsys):
    data = _write_dataset(tmp_path / "train.jsonl")
    model = tmp_path / "model.json"
    metrics = tmp_path / "metrics.jsonl"

    main([
        "train",
        "--data", str(data),
        "--out", str(model),
        "--hidden", "8",
        "--epochs", "4",
        "--lr", "0.05",
        "--seed", "3",
        "--metrics", str(metrics),
    ])
    out = capsys.readouterr().out.strip().splitlines()
    assert out[0] == "=== starseed-nn run ==="
    result = json.loads(out[-1])
    assert result["out"] == str(model)
    assert 1 <= result["epochs"] <= 4
    assert model.exists()
    records = [json.loads(line) for line in metrics.read_text().splitlines()]
    assert len(records) == result["epochs"]
    assert {"train_loss", "val_loss", "best_val_loss"} <= set(records[0])

    main(["infer", "--model", str(model), "--data", str(data)])
    predictions = [json.loads(line) for line in capsys.readouterr().out.splitlines()]
    assert len(predictions) == 24
    assert all(isinstance(p, list) and len(p) == 1 for p in predictions)


def test_cli_reads_stdin_and_honours_config(tmp_path, capsys, monkeypatch):
    data = _write_dataset(tmp_path / "train.jsonl", n=10)
    config = tmp_path / "train.json"
    config.write_text(json.dumps({"hidden": 4, "epochs": 2, "calibrate": False}))
    model = tmp_path / "model.json"
    monkeypatch.setattr("sys.stdin", io.StringIO(data.read_text()))

    main(["train", "--config", str(config), "--out", str(model), "--seed", "0"])
    result = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    payload = json.loads(model.read_text())
    assert payload["hidden"] == 4
    assert payload["threshold"] == 0.0
    assert result["threshold"] == 0.0

    monkeypatch.setattr("sys.stdin", io.StringIO('{"x": [0.0, 0.0, 0.0, 0.0]}\n'))
    main(["infer", "--model", str(model)])
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    expected = load_artifact(model).mlp.predict(np.zeros(4, dtype=np.float32))
    assert json.loads(lines[0]) == expected.tolist()


def test_cli_empty_dataset_exits_nonzero(tmp_path):
    empty = tmp_path / "empty.jsonl"
    empty.write_text("\n\n")
    with pytest.raises(SystemExit) as excinfo:
        main(["train", "--data", str(empty), "--out", str(tmp_path / "model.json")])
    assert "no samples" in str(excinfo.value.code)
    assert not (tmp_path / "model.json").exists()


def test_cli_infer_rejects_wrong_feature_count(tmp_path, capsys):
    data = _write_dataset(tmp_path / "train.jsonl", n=6)
    model = tmp_path / "model.json"
    main(["train", "--data", str(data), "--out", str(model), "--hidden", "2", "--epochs", "1", "--seed", "0"])
    capsys.readouterr()
    bad = tmp_path / "bad.jsonl"
    bad.write_text('{"x": [1.0, 2.0]}\n')
    with pytest.raises(SystemExit) as excinfo:
        main(["infer", "--model", str(model), "--data", str(bad)])
    assert "expects 4 features" in str(excinfo.value.code)


def test_cli_missing_model_exits_nonzero(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["infer", "--model", str(tmp_path / "absent.json"), "--data", str(tmp_path / "x.jsonl")])
    assert str(excinfo.value.code).startswith("error:")


def test_cli_zero_epochs_prints_strict_json(tmp_path, capsys):
    data = _write_dataset(tmp_path / "train.jsonl", n=6)
    model = tmp_path / "model.json"
    main(["train", "--data", str(data), "--out", str(model), "--epochs", "0", "--seed", "0"])
    line = capsys.readouterr().out.strip().splitlines()[-1]

    def _reject(token):
        raise ValueError(token)

    result = json.loads(line, parse_constant=_reject)
    assert result["epochs"] == 0
    assert result["best_val_loss"] is None
    assert result["stopped_early"] is False
    assert model.exists()


def test_cli_out_of_range_feature_exits_with_error(tmp_path):
    data = tmp_path / "train.jsonl"
    data.write_text('{"x": [1%s], "y": [1.0]}\n' % ("0" * 400))
    with pytest.raises(SystemExit) as excinfo:
        main(["train", "--data", str(data), "--out", str(tmp_path / "model.json")])
    assert str(excinfo.value.code).startswith("error: line 1")
    assert not (tmp_path / "model.json").exists()


def test_cli_reporting_flags_and_no_calibrate(tmp_path, capsys):
    pytest.importorskip("matplotlib")
    data = _write_dataset(tmp_path / "train.jsonl", n=12)
    model = tmp_path / "model.json"
    metrics_csv = tmp_path / "reports" / "metrics.csv"
    plot = tmp_path / "reports" / "loss.png"

    main([
        "train",
        "--data", str(data),
        "--out", str(model),
        "--hidden", "4",
        "--epochs", "3",
        "--seed", "1",
        "--no-calibrate",
        "--metrics-csv", str(metrics_csv),
        "--plot", str(plot),
    ])
    result = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert result["threshold"] == 0.0
    assert load_artifact(model).threshold == 0.0

    with metrics_csv.open() as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == result["epochs"]
    assert {"epoch", "train_loss", "val_loss", "best_val_loss"} <= set(rows[0])
    assert plot.exists() and plot.stat().st_size > 0
