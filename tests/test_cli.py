"""
Tests for bin/analyze_impact.py
"""

import importlib.util
import json
from pathlib import Path

import pandas as pd
import pytest


SCRIPT = Path(__file__).resolve().parent.parent / "bin" / "analyze_impact.py"


@pytest.fixture(scope="module")
def cli():
    spec = importlib.util.spec_from_file_location("analyze_impact", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CENTR_IMPACT_ALPHA_PARAMETER", "CENTR_IMPACT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


class TestAnalyzeImpactCli:

    def test_synthetic_cascade_export(self, cli, tmp_path):
        output = tmp_path / "out" / "cascade.json"
        code = cli.main(["cascade", "--seed", "42", "--quiet", "--output", str(output)])
        assert code == 0
        data = json.loads(output.read_text())
        assert 0.0 <= data["cascade_score"] <= 1.0
        assert data["layers"][0]["label"] == "1st degree"

    def test_json_to_stdout(self, cli, capsys):
        code = cli.main(["dynamics", "--seed", "3", "--json"])
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data["domains"]) == 5

    def test_csv_input(self, cli, tmp_path, capsys, consensus_ratings):
        path = tmp_path / "ratings.csv"
        pd.DataFrame(consensus_ratings).to_csv(path, index=False)
        code = cli.main(["alignment", "--input", str(path)])
        assert code == 0
        out = capsys.readouterr().out
        assert "Alignment Score: 0.9600" in out

    def test_missing_score_shown_as_na(self, cli, tmp_path, capsys):
        path = tmp_path / "ratings.csv"
        pd.DataFrame({
            "role": ["researcher", "partner"],
            "alignment": ["Goals", "Goals"],
            "rating": [0.8, 0.4],
        }).to_csv(path, index=False)
        assert cli.main(["alignment", "--input", str(path)]) == 0
        assert "Alignment Score: N/A" in capsys.readouterr().out

    def test_alpha_override(self, cli, tmp_path):
        path = tmp_path / "edges.csv"
        pd.DataFrame({"from": [1], "to": [2], "layer": [1]}).to_csv(path, index=False)
        output = tmp_path / "cascade.json"
        code = cli.main(["cascade", "--input", str(path), "--alpha", "1.0", "-q", "-o", str(output)])
        assert code == 0
        assert json.loads(output.read_text())["degraded_metrics"] == ["global_alpha"]

    def test_schema_error_exit_code(self, cli, tmp_path, capsys):
        path = tmp_path / "edges.csv"
        pd.DataFrame({"from": [1], "to": [2]}).to_csv(path, index=False)
        assert cli.main(["cascade", "--input", str(path)]) == 1
        assert "Error" in capsys.readouterr().err

    def test_unreadable_input(self, cli, tmp_path):
        assert cli.main(["dynamics", "--input", str(tmp_path / "absent.csv")]) == 1

    def test_unknown_component(self, cli):
        with pytest.raises(SystemExit):
            cli.main(["influence"])
