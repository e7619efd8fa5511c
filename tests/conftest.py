from __future__ import annotations

import random

import pytest

from patternmaker import PatternConfig, Surface


class RecordingSurface(Surface):
    """Surface that also keeps a log of primitive calls and transforms."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.calls: list[tuple] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))

    def translate(self, dx, dy):
        self._record("translate", dx, dy)
        super().translate(dx, dy)

    def rotate(self, angle_rad):
        self._record("rotate", angle_rad)
        super().rotate(angle_rad)

    def fill_rect(self, x, y, w, h, color):
        self._record("fill_rect", x, y, w, h, color)
        super().fill_rect(x, y, w, h, color)

    def fill_polygon(self, points, color):
        self._record("fill_polygon", list(points), color)
        super().fill_polygon(points, color)

    def stroke_polygon(self, points, color, width=1):
        self._record("stroke_polygon", list(points), color, width)
        super().stroke_polygon(points, color, width)

    def fill_circle(self, cx, cy, radius, color):
        self._record("fill_circle", cx, cy, radius, color)
        super().fill_circle(cx, cy, radius, color)

    def stroke_arc(self, cx, cy, radius, start, end, color, width=1):
        self._record("stroke_arc", cx, cy, radius, start, end, color, width)
        super().stroke_arc(cx, cy, radius, start, end, color, width)

    def stroke_bezier(self, start, segments, color, width=1):
        self._record("stroke_bezier", start, list(segments), color, width)
        super().stroke_bezier(start, segments, color, width)

    def named(self, name: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == name]


class ConstantRandom(random.Random):
    """random() always returns the same value; randrange/choice follow from it."""

    def __init__(self, value: float) -> None:
        self.value = value
        super().__init__(0)

    def random(self) -> float:
        return self.value


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def default_config() -> PatternConfig:
    return PatternConfig()
