import json
import logging

import pytest

from towergen import __version__
from towergen.__main__ import main, parse_param_args
from towergen.presets import TOWERGEN_PRESET_DATA, clear_cache


@pytest.fixture(autouse=True)
def bundled_only(monkeypatch, tmp_path):
    monkeypatch.delenv(TOWERGEN_PRESET_DATA, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    clear_cache()
    yield
    clear_cache()
    logger = logging.getLogger("towergen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def test_parse_param_args():
    assert parse_param_args(["a=1", " b = x=y "]) == {"a": "1", "b": "x=y"}
    assert parse_param_args(None) == {}
    with pytest.raises(ValueError):
        parse_param_args(["novalue"])


def test_presets_command(capsys):
    assert main(["presets"]) == 0
    out = capsys.readouterr().out.split()
    assert "twisted" in out
    assert "star_spire" in out


def test_plan_json(capsys):
    rc = main(["plan", "--json", "-p", "segment_count=3", "-p", "tower_height=3",
               "-p", "twist_max=90", "-p", "scale_min=1", "-p", "scale_max=1",
               "-p", "scale_curve=linear"])
    assert rc == 0
    entries = json.loads(capsys.readouterr().out)
    assert [e["offset"] for e in entries] == pytest.approx([-1.5, -0.5, 0.5])
    assert [e["twist_degrees"] for e in entries] == pytest.approx([0.0, 45.0, 90.0])
    assert entries[0]["scale"] == pytest.approx([4.0, 0.25, 0.5])


def test_plan_text(capsys):
    assert main(["plan", "-p", "segment_count=2"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].split() == ["seg", "t", "offset", "twist", "scale"]
    assert len(lines) == 3


def test_build_json(capsys):
    rc = main(["build", "--json", "--shape", "star", "-p", "segment_count=4",
               "-p", "star_point_count=6"])
    assert rc == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["shape"] == "star"
    assert summary["segments"] == 4
    assert summary["vertices_per_segment"] == 24
    assert summary["vertices"] == 96
    assert summary["surface_area"] > 0
    assert summary["bottom_color"] == "#f2a365"


def test_build_from_preset_instanced(capsys):
    rc = main(["build", "--json", "--instanced", "--preset", "drum_stack"])
    assert rc == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["instances"] == 24
    assert summary["profile_vertices"] == 2 * 24 + 2
    assert summary["bottom_color"] == "#8d6e63"
    assert summary["top_color"] == "#eeeeee"


def test_seed_makes_build_repeatable(capsys):
    args = ["build", "--json", "--shape", "polygon", "--seed", "4",
            "-p", "polygon_irregularity=0.3"]
    main(args)
    first = capsys.readouterr().out
    main(args)
    assert capsys.readouterr().out == first


def test_errors_return_one(capsys):
    assert main(["plan", "-p", "segment_count"]) == 1
    assert "expected NAME=VALUE" in capsys.readouterr().err
    assert main(["build", "--preset", "no_such_tower"]) == 1
    assert "no_such_tower" in capsys.readouterr().err


def test_version(capsys):
    with pytest.raises(SystemExit):
        main(["--version"])
    assert __version__ in capsys.readouterr().out


def test_log_file(tmp_path):
    log = tmp_path / "towergen.log"
    assert main(["-v", "--log-file", str(log), "build", "-p", "segment_count=2"]) == 0
    assert "Logging initialized" in log.read_text(encoding="utf-8")


def test_verbose_logs_stay_off_stdout(capsys):
    assert main(["-v", "build", "--json", "-p", "segment_count=2"]) == 0
    captured = capsys.readouterr()
    summary = json.loads(captured.out)
    assert summary["segments"] == 2
    assert "Logging initialized" in captured.err
