"""Tests for the command-line interface."""

import json

import pytest
from jismeshcode.cli import build_parser, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("JISMESHCODE_LEVEL", raising=False)


def run(capsys, *argv):
    main(list(argv))
    return capsys.readouterr().out


class TestEncode:
    """Tests for the encode command."""

    def test_default_level(self, capsys):
        out = run(capsys, "encode", "35.6812", "139.7671")
        assert out.strip() == "third    53394611"

    def test_explicit_level(self, capsys):
        out = run(capsys, "encode", "35.6812", "139.7671", "--level", "half")
        assert out.strip() == "half     533946113"

    def test_all_levels_json(self, capsys):
        out = run(capsys, "encode", "35.6812", "139.7671", "--all", "-f", "json")
        payload = json.loads(out)
        assert payload["codes"]["first"] == "5339"
        assert payload["codes"]["eighth"] == "53394611323"
        assert payload["codes"]["fifth"] == "5339461173"
        assert len(payload["codes"]) == 7

    def test_level_from_environment(self, capsys, monkeypatch):
        monkeypatch.setenv("JISMESHCODE_LEVEL", "second")
        out = run(capsys, "encode", "35.6812", "139.7671")
        assert out.strip() == "second   533946"

    def test_outside_extent(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["encode", "19.0", "139.0"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_unknown_level(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["encode", "35.0", "139.0", "--level", "sixth"])
        assert exc_info.value.code == 2


class TestCodeCommands:
    """Tests for decode, parent, children, convert and neighbors."""

    def test_decode_json(self, capsys):
        payload = json.loads(run(capsys, "decode", "5339", "-f", "json"))
        assert payload["level"] == "first"
        assert payload["bounds"]["min_lon"] == pytest.approx(139.0)
        assert payload["bounds"]["max_lat"] == pytest.approx(36.0)

    def test_decode_text(self, capsys):
        out = run(capsys, "decode", "53394611")
        assert out.startswith("Code:   53394611 (third, ~1000m)")

    def test_decode_ambiguous_with_level(self, capsys):
        payload = json.loads(run(capsys, "decode", "5339461111", "--level", "fifth", "-f", "json"))
        assert payload["level"] == "fifth"

    def test_decode_invalid(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["decode", "5339a611"])
        assert exc_info.value.code == 1
        assert "position 4" in capsys.readouterr().err

    def test_parent(self, capsys):
        assert run(capsys, "parent", "53394611").strip() == "533946"

    def test_parent_of_first_level(self, capsys):
        payload = json.loads(run(capsys, "parent", "5339", "-f", "json"))
        assert payload == {"parent": None}

    def test_children(self, capsys):
        out = run(capsys, "children", "53394611")
        assert out.split() == ["533946111", "533946112", "533946113", "533946114"]

    def test_children_fifth(self, capsys):
        payload = json.loads(
            run(capsys, "children", "53394611", "--child-level", "fifth", "-f", "json")
        )
        assert len(payload["children"]) == 100

    def test_convert(self, capsys):
        assert run(capsys, "convert", "53394611", "--level", "first").strip() == "5339"

    def test_convert_ten_digit_code_level(self, capsys):
        """Without --code-level the digits read as a quarter code."""
        assert run(capsys, "convert", "5339461111", "--level", "half").strip() == "533946111"
        out = run(capsys, "convert", "5339461111", "--code-level", "fifth", "--level", "second")
        assert out.strip() == "533946"

    def test_convert_fifth_code_to_half(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["convert", "5339461111", "--code-level", "fifth", "--level", "half"])
        assert exc_info.value.code == 1
        assert "different branches" in capsys.readouterr().err

    def test_convert_to_finer_level(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["convert", "5339", "--level", "third"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_neighbors(self, capsys):
        payload = json.loads(run(capsys, "neighbors", "3022", "-f", "json"))
        assert payload["north"] == "3122"
        assert payload["south"] is None
        assert len(payload) == 8

    def test_neighbors_text_marks_missing(self, capsys):
        lines = run(capsys, "neighbors", "3022").splitlines()
        assert lines[0].split() == ["north", "3122"]
        assert lines[4].split() == ["south", "-"]


class TestBbox:
    """Tests for the bbox command."""

    BBOX = "139.705,35.605,139.795,35.695"

    def test_json_total(self, capsys):
        payload = json.loads(run(capsys, "bbox", self.BBOX, "-f", "json"))
        assert payload["level"] == "third"
        assert payload["total"] == 96
        assert len(payload["codes"]) == 96

    def test_limit(self, capsys):
        lines = run(capsys, "bbox", self.BBOX, "--limit", "5").splitlines()
        assert len(lines) == 6
        assert lines[-1] == "... (91 more, 96 total)"

    def test_bad_bbox(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["bbox", "139.7,35.6,139.8"])
        assert exc_info.value.code == 2


class TestParser:
    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        assert "usage:" in capsys.readouterr().out

    def test_defaults(self):
        args = build_parser().parse_args(["decode", "5339"])
        assert args.level is None
        assert args.output_format == "text"
