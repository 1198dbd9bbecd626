"""
Tests for the command-line interface.
"""

import json
import sys

import pytest

from fitscore import __version__
from fitscore.app import main


@pytest.fixture
def files(tmp_path, requirement_data, candidate_data, minimal_candidate_data):
    def write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return {
        "requirement": write("frontend.json", requirement_data),
        "ada": write("ada.json", candidate_data),
        "min": write("min.json", minimal_candidate_data),
        "broken": write("broken.json", {"skills": []}),
    }


def run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["fitscore", *argv])
    main()


class TestValidate:
    def test_valid(self, monkeypatch, capsys, files):
        run(monkeypatch, "validate", "--kind", "candidate", files["ada"])
        assert capsys.readouterr().out.strip() == "Valid"

    def test_invalid(self, monkeypatch, capsys, files):
        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "validate", "--kind", "candidate", files["broken"])
        assert exc_info.value.code == 2
        out = capsys.readouterr().out
        assert "Invalid:" in out
        assert "Missing required field: contact" in out

    def test_missing_file(self, monkeypatch, tmp_path):
        with pytest.raises(SystemExit, match="not found"):
            run(monkeypatch, "validate", "--kind", "requirement", str(tmp_path / "nope.json"))


class TestScore:
    def test_score(self, monkeypatch, capsys, files):
        run(monkeypatch, "score", files["requirement"], files["ada"])
        data = json.loads(capsys.readouterr().out)
        assert data["scores"]["total"] == 84
        assert data["classification"] == "shortlisted"
        assert data["explanation"]["is_fallback"] is True

    def test_invalid_candidate(self, monkeypatch, files):
        with pytest.raises(SystemExit, match="Invalid candidate"):
            run(monkeypatch, "score", files["requirement"], files["broken"])


class TestRankAndCompare:
    def test_rank(self, monkeypatch, capsys, files):
        run(monkeypatch, "rank", files["requirement"], files["min"], files["ada"], files["broken"])
        captured = capsys.readouterr()
        data = json.loads(captured.out)

        assert data["job_id"] == "frontend"
        assert [c["id"] for c in data["candidates"]] == ["ada", "min"]
        assert data["candidates"][0]["rank"] == 1
        assert data["stats"]["total"] == 2
        assert "[error] broken" in captured.err

    def test_rank_filter(self, monkeypatch, capsys, files):
        run(monkeypatch, "rank", files["requirement"], files["ada"], files["min"], "--only", "rejected")
        data = json.loads(capsys.readouterr().out)
        assert [c["id"] for c in data["candidates"]] == ["min"]

    def test_compare(self, monkeypatch, capsys, files):
        run(monkeypatch, "compare", files["requirement"], files["min"], files["ada"])
        data = json.loads(capsys.readouterr().out)
        assert data["overall_winner"] == "ada"
        assert len(data["dimensions"]) == 4

    def test_compare_needs_two(self, monkeypatch, files):
        with pytest.raises(SystemExit, match="at least 2"):
            run(monkeypatch, "compare", files["requirement"], files["ada"], files["broken"])


def test_version(monkeypatch, capsys):
    run(monkeypatch, "--version")
    assert capsys.readouterr().out.strip() == __version__


class TestThresholdArgument:
    """Out-of-range thresholds are rejected as usage errors."""

    @pytest.mark.parametrize("value", ["150", "-1", "high"])
    def test_score_rejects_bad_threshold(self, monkeypatch, capsys, files, value):
        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "score", files["requirement"], files["ada"], "--threshold", value)
        assert exc_info.value.code == 2
        assert "--threshold" in capsys.readouterr().err

    def test_rank_rejects_bad_threshold(self, monkeypatch, files):
        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, "rank", files["requirement"], files["ada"], "--threshold", "101")
        assert exc_info.value.code == 2

    def test_custom_threshold_applied(self, monkeypatch, capsys, files):
        run(monkeypatch, "score", files["requirement"], files["ada"], "--threshold", "90")
        assert json.loads(capsys.readouterr().out)["classification"] == "borderline"
