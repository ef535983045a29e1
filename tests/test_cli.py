"""Tests for the command line interface."""

import json
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from chiptheory.cli.main import _parse_root, main
from chiptheory.models.analysis import AnalysisPhase, KeySignature, Mode
from chiptheory.storage import JsonFileStore


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def saved(settings, track_id: str = "song"):
    return JsonFileStore(settings.store_dir).get(track_id)


class TestCli:
    """Tests for the chiptheory command group."""

    def test_version(self, runner: CliRunner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "chiptheory" in result.output

    def test_info(self, runner: CliRunner, settings):
        result = runner.invoke(main, ["info"])
        assert result.exit_code == 0
        assert "Beats per measure: 4" in result.output

    def test_click_twice_seeds_grid(self, runner: CliRunner, settings, dump_path: Path):
        first = runner.invoke(main, ["click", str(dump_path), "0"])
        assert first.exit_code == 0, first.output
        assert saved(settings).phase is AnalysisPhase.ONE_ANCHOR

        second = runner.invoke(main, ["click", str(dump_path), "1"])
        assert second.exit_code == 0, second.output

        state = saved(settings)
        assert state.phase is AnalysisPhase.SEEDED
        assert state.anchors == pytest.approx((0.2, 0.5))
        assert state.selected_downbeat_index is None

    def test_click_out_of_range(self, runner: CliRunner, settings, dump_path: Path):
        result = runner.invoke(main, ["click", str(dump_path), "9", "--voice", "triangle"])
        assert result.exit_code == 1
        assert saved(settings) is None

    def test_click_bad_dump(self, runner: CliRunner, settings, tmp_path: Path):
        result = runner.invoke(main, ["click", str(tmp_path / "nope.json"), "0"])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_select_and_correct(self, runner: CliRunner, settings, dump_path: Path):
        runner.invoke(main, ["click", str(dump_path), "0"])
        runner.invoke(main, ["click", str(dump_path), "1"])

        result = runner.invoke(main, ["select", "3", "--track", "song"])
        assert result.exit_code == 0
        # Anchors 0.2 and 0.5 put measure 3 at 1.1s
        assert "1.100s" in result.output
        assert saved(settings).selected_downbeat_index == 3

        runner.invoke(main, ["click", str(dump_path), "0", "--voice", "pulse2"])
        state = saved(settings)
        assert state.corrected_measures == {3: 0.0}
        assert state.phase is AnalysisPhase.CORRECTED

    def test_key(self, runner: CliRunner, settings):
        result = runner.invoke(main, ["key", "A", "minor", "--track", "song"])
        assert result.exit_code == 0, result.output
        assert saved(settings).key == KeySignature(root=9, mode=Mode.MINOR)

        result = runner.invoke(main, ["key", "--clear", "--track", "song"])
        assert result.exit_code == 0
        assert saved(settings).key is None

    def test_key_requires_root(self, runner: CliRunner, settings):
        result = runner.invoke(main, ["key", "--track", "song"])
        assert result.exit_code != 0

    def test_reset(self, runner: CliRunner, settings, dump_path: Path):
        runner.invoke(main, ["key", "D", "--track", "song"])
        runner.invoke(main, ["click", str(dump_path), "0"])

        result = runner.invoke(main, ["reset", "--track", "song"])
        assert result.exit_code == 0
        state = saved(settings)
        assert state.anchors == ()
        assert state.key == KeySignature(root=2)

    def test_analyze(self, runner: CliRunner, settings, dump_path: Path, tmp_path: Path):
        runner.invoke(main, ["key", "C#", "--track", "song"])
        output = tmp_path / "annotated"

        result = runner.invoke(main, ["analyze", str(dump_path), "-o", str(output)])

        assert result.exit_code == 0, result.output
        with open(output / "annotation.json") as f:
            data = json.load(f)
        assert data["analysis"]["key"] == {"root": 1, "mode": "major"}
        assert data["voices"]["pulse1"][0]["degree"]["label"] == "1"

    def test_analyze_missing_file(self, runner: CliRunner, settings, tmp_path: Path):
        result = runner.invoke(main, ["analyze", str(tmp_path / "missing.json")])
        assert result.exit_code == 1

    def test_playing(self, runner: CliRunner, settings, dump_path: Path):
        # 370ms polled, minus the 70ms cursor lag
        result = runner.invoke(main, ["playing", str(dump_path), "370"])

        assert result.exit_code == 0, result.output
        assert "C#6" in result.output
        assert "A4" in result.output
        assert "F#3" in result.output

    def test_playing_reports_measure(self, runner: CliRunner, settings, dump_path: Path):
        runner.invoke(main, ["click", str(dump_path), "0"])
        runner.invoke(main, ["click", str(dump_path), "1"])

        # 0.3s lies between the downbeats at 0.2 and 0.5
        result = runner.invoke(main, ["playing", str(dump_path), "370"])
        assert result.exit_code == 0, result.output
        assert "Measure: 0" in result.output

        result = runner.invoke(main, ["playing", str(dump_path), "170"])
        assert "Measure:" not in result.output


class TestParseRoot:
    """Tests for pitch class parsing."""

    @pytest.mark.parametrize(
        "text,expected", [("C", 0), ("c#", 1), ("Fs", 6), ("B", 11), ("9", 9)]
    )
    def test_valid(self, text: str, expected: int):
        assert _parse_root(text) == expected

    @pytest.mark.parametrize("text", ["H", "12", "Db"])
    def test_invalid(self, text: str):
        with pytest.raises(click.BadParameter):
            _parse_root(text)
