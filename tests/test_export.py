from __future__ import annotations

import io
import random
import re

import pytest
from PIL import Image

import patternmaker as pm
from patternmaker import PatternConfig, PatternSession, Surface


def test_suggested_filename_format():
    assert pm.suggested_filename("radial", 1700000000123) == "pattern-radial-1700000000123.png"
    assert re.fullmatch(r"pattern-grid-\d{13}\.png", pm.suggested_filename("grid"))


def test_export_png_round_trips_through_pillow():
    surface = Surface(120, 80)
    pm.render(PatternConfig(type="tessellation"), surface, random.Random(0))
    data = pm.export_png(surface)
    with Image.open(io.BytesIO(data)) as im:
        assert im.format == "PNG"
        assert im.size == (120, 80)


def test_generate_writes_file(tmp_path):
    out = tmp_path / "fractal.png"
    path = pm.generate(str(out), PatternConfig(type="fractal"), width=160, height=120, seed=3)
    assert path == str(out)
    with Image.open(out) as im:
        assert im.size == (160, 120)


def test_generate_with_seed_is_reproducible(tmp_path):
    a = tmp_path / "a.png"
    b = tmp_path / "b.png"
    config = PatternConfig(type="geometric")
    pm.generate(str(a), config, width=100, height=100, seed=11)
    pm.generate(str(b), config, width=100, height=100, seed=11)
    with Image.open(a) as ia, Image.open(b) as ib:
        assert ia.tobytes() == ib.tobytes()


def test_session_renders_on_creation_and_every_replacement():
    session = PatternSession(surface=Surface(200, 150), rng=random.Random(4))
    assert session.renders == 1
    assert not session.surface.is_blank()

    first = session.config
    updated = session.update(type="radial", complexity=2)
    assert session.renders == 2
    assert updated is session.config
    assert first.type == "geometric"
    assert session.config.type == "radial"

    session.randomize()
    assert session.renders == 3


def test_session_rejects_invalid_update_without_rerender():
    session = PatternSession(surface=Surface(50, 50), rng=random.Random(4))
    with pytest.raises(ValueError):
        session.update(density=1)
    assert session.renders == 1
    assert session.config.density == 50


def test_session_export_names_file_after_current_type():
    session = PatternSession(PatternConfig(type="organic"), Surface(60, 40), random.Random(0))
    data, name = session.export(timestamp_ms=42)
    assert name == "pattern-organic-42.png"
    assert data.startswith(b"\x89PNG")
