"""Tests for the command-line interface."""

import json

from stackup.cli import main
from stackup.models import StackupConfig


class TestCLI:
    def test_example_then_analyze_json(self, tmp_path, capsys):
        path = str(tmp_path / "gap.json")
        assert main(["example", "gap", "-o", path]) == 0
        capsys.readouterr()

        assert main(["analyze", path, "-n", "1000", "--seed", "3", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["worstCase"]["nominal"] == 5.0
        assert "samples" not in data["monteCarlo"]
        assert len(data["monteCarlo"]["histogram"]) == 40
        assert data["contributions"][0]["name"] == "Block"

    def test_analyze_text(self, tmp_path, capsys):
        path = str(tmp_path / "shaft.json")
        main(["example", "shaft", "-o", path])
        capsys.readouterr()

        assert main(["analyze", path, "-n", "500", "--seed", "1", "--workers", "2"]) == 0
        out = capsys.readouterr().out
        assert "Shaft-Housing Assembly" in out
        assert "Worst-Case" in out
        assert "Variance Contribution" in out

    def test_analyze_with_samples(self, tmp_path, capsys):
        path = str(tmp_path / "gap.json")
        main(["example", "gap", "-o", path])
        capsys.readouterr()

        main(["analyze", path, "-n", "50", "--seed", "3", "--json", "--samples"])
        data = json.loads(capsys.readouterr().out)
        assert len(data["monteCarlo"]["samples"]) == 50

    def test_empty_chain_reports_error(self, tmp_path, capsys):
        path = str(tmp_path / "empty.json")
        StackupConfig(name="Empty").save(path)
        assert main(["analyze", path]) == 2
        assert "error" in capsys.readouterr().err

    def test_bad_iterations_reports_error(self, tmp_path, capsys):
        path = str(tmp_path / "gap.json")
        main(["example", "gap", "-o", path])
        assert main(["analyze", path, "-n", "0"]) == 2
        assert "iterations" in capsys.readouterr().err

    def test_missing_file_reports_error(self, tmp_path, capsys):
        assert main(["analyze", str(tmp_path / "nope.json")]) == 2
        assert "error" in capsys.readouterr().err

    def test_malformed_json_reports_error(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text('{"name": ')
        assert main(["analyze", str(path)]) == 2
        assert "error" in capsys.readouterr().err

    def test_dimension_without_nominal_reports_error(self, tmp_path, capsys):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"name": "S", "dimensions": [{"name": "A", "tolPlus": 0.1}]}))
        assert main(["analyze", str(path)]) == 2
        assert "nominal" in capsys.readouterr().err

    def test_processes(self, capsys):
        assert main(["processes"]) == 0
        assert "Grinding" in capsys.readouterr().out

    def test_no_command(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out
