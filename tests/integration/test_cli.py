import json
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from cli.main import main
from onlineprop.data.tables import make_xor_table


def test_cli_smoke_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "xor-smoke"])
    run_dir = Path("runs/xor-smoke")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    assert (run_dir / "weights.npz").exists()

    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["epochs"] == 5
    assert payload["validation_error"] is not None


def test_cli_trains_on_csv_table(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    pd.DataFrame(make_xor_table(), columns=["x1", "x2", "y"]).to_csv("train.csv", index=False)
    main(
        [
            "--data",
            "train.csv",
            "--validation-data",
            "train.csv",
            "--num-inputs",
            "2",
            "--num-hidden",
            "3",
            "--termination",
            "epochs",
            "--max-epochs",
            "4",
            "--histories",
            "training|validation",
            "--run-dir",
            "out",
            "--enable-plots",
            "--dump-config",
            "out/requested.json",
        ]
    )
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["epochs"] == 4
    assert Path(payload["plot"]).exists()
    requested = json.loads(Path("out/requested.json").read_text())
    assert requested["model"] == {"num_inputs": 2, "num_hidden": 3}
    resolved = json.loads(Path("out/config.json").read_text())
    assert resolved["train"]["termination_mode"] == "epochs"
    assert resolved["train"]["histories"] == [
        "training_outputs",
        "training_errors",
        "validation_outputs",
        "validation_errors",
    ]
    weights = np.load("out/weights.npz")["weights"]
    assert weights.shape == (3, 2, 4)


def test_cli_reports_configuration_errors(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    np.save("train.npy", make_xor_table())
    with pytest.raises(SystemExit) as excinfo:
        main(["--data", "train.npy", "--num-inputs", "3"])
    assert "output" in str(excinfo.value)


def test_cli_lists_presets(capsys):
    with pytest.raises(SystemExit):
        main(["--list-presets"])
    names = capsys.readouterr().out.split()
    assert {"xor-online", "xor-smoke", "sine-online"} <= set(names)


def test_cli_keeps_config_model_settings_with_data(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    pd.DataFrame(make_xor_table(), columns=["x1", "x2", "y"]).to_csv("train.csv", index=False)
    Path("c.json").write_text(
        json.dumps(
            {
                "model": {"num_inputs": 2, "num_hidden": 3},
                "train": {"termination_mode": "epochs", "max_epochs": 2, "run_dir": "out"},
            }
        )
    )
    main(["--config", "c.json", "--data", "train.csv"])
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["epochs"] == 2
    assert np.load("out/weights.npz")["weights"].shape == (3, 2, 4)


@pytest.mark.parametrize(
    "argv",
    [
        ["--config", "bad.toml"],
        ["--data", "train.parquet", "--num-inputs", "2"],
    ],
)
def test_cli_reports_input_errors_cleanly(tmp_path, monkeypatch, argv):
    monkeypatch.chdir(tmp_path)
    Path("bad.toml").write_text("x = 1\n")
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert str(excinfo.value).startswith("error: Unsupported")
