from __future__ import annotations

import json
import re

import pytest
from PIL import Image

import patternmaker as pm


def test_main_writes_png_and_prints_path(tmp_path, capsys):
    out = tmp_path / "out.png"
    code = pm.main([
        "--out", str(out), "--size", "200x100", "--type", "radial",
        "--density", "40", "--complexity", "3", "--symmetry", "4", "--seed", "1",
    ])
    assert code == 0
    assert capsys.readouterr().out.strip() == str(out)
    with Image.open(out) as im:
        assert im.size == (200, 100)


def test_main_uses_suggested_name_in_out_dir(tmp_path, capsys):
    pm.main(["--out-dir", str(tmp_path), "--type", "grid", "--size", "80x60"])
    printed = capsys.readouterr().out.strip()
    assert re.search(r"pattern-grid-\d+\.png$", printed)
    assert len(list(tmp_path.glob("pattern-grid-*.png"))) == 1


def test_main_reads_config_file_and_flags_override(tmp_path, monkeypatch):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"type": "fractal", "colorScheme": ["#000000", "#ff0000", "#00ff00"]}))
    seen = {}

    def fake_render(config, surface, rng=None):
        seen["config"] = config

    monkeypatch.setattr(pm, "render", fake_render)
    pm.main(["--config", str(cfg), "--symmetry", "6", "--out", str(tmp_path / "x.png"), "--size", "20x20"])
    assert seen["config"].type == "fractal"
    assert seen["config"].symmetry == 6
    assert seen["config"].color_scheme == ("#000000", "#ff0000", "#00ff00")


def test_main_randomize_with_seed(tmp_path, monkeypatch):
    seen = []
    monkeypatch.setattr(pm, "render", lambda config, surface, rng=None: seen.append(config))
    for name in ("a.png", "b.png"):
        pm.main(["--randomize", "--seed", "9", "--out", str(tmp_path / name), "--size", "20x20"])
    assert seen[0] == seen[1]


@pytest.mark.parametrize("argv", [
    ["--density", "5"],
    ["--palette", "#000000,#ffffff"],
    ["--size", "800by600"],
    ["--type", "voronoi"],
])
def test_main_reports_bad_arguments(argv, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        pm.main(argv + ["--out", str(tmp_path / "x.png")])
    assert excinfo.value.code == 2


def test_parse_size():
    assert pm.parse_size("800x600") == (800, 600)
    assert pm.parse_size("10X20") == (10, 20)


@pytest.mark.parametrize("palette", [None, 5])
def test_main_reports_non_list_palette_in_config_file(tmp_path, palette):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"color_scheme": palette}))
    with pytest.raises(SystemExit) as excinfo:
        pm.main(["--config", str(cfg), "--out", str(tmp_path / "x.png")])
    assert excinfo.value.code == 2
