
"""
patternmaker.py
===============

An interactive procedural pattern generator. A handful of parameters
(pattern family, density, complexity, symmetry, scale, rotation and a color
palette) drive one of six drawing routines that paint onto an 800×600 raster,
which can then be exported as PNG.

Key features
------------
- Six pattern families:
    * geometric     (scattered translucent polygons)
    * organic       (free-form cubic Bézier scribbles)
    * grid          (mosaic of squares, circles, triangles and crosses)
    * radial        (concentric arc bands around the center)
    * fractal       (recursive branching tree)
    * tessellation  (hexagon / star / polygon tiling)
- A canvas-like drawing surface on top of Pillow with a save/restore affine
  transform stack (translate, rotate, scale).
- Immutable, validated configuration; every change is a full replacement that
  triggers one full re-render.
- "Surprise me" randomizer over curated palettes.
- Unseeded by default; pass a seed (or your own ``random.Random``) for
  reproducible output.

Quick start
-----------
>>> from patternmaker import PatternConfig, Surface, render, save_png
>>> surface = Surface()
>>> render(PatternConfig(type="radial", density=40, complexity=3), surface)
>>> save_png(surface, "radial.png")

Command line
------------
$ patternmaker --type tessellation --density 60 --complexity 5 \
    --palette "#fa709a,#fee140,#30cfd0,#330867" --rotation 15 --seed 7

$ patternmaker --randomize --out-dir /tmp/patterns

License: MIT
"""

import argparse
import dataclasses
import io
import json
import logging
import math
import os
import random
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw
import numpy as np


logger = logging.getLogger(__name__)

Point = Tuple[float, float]

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 600
BACKGROUND = "#ffffff"

# Alpha suffixes appended to "#rrggbb" colors for translucent fills.
FILL_ALPHA = "80"        # ~50%: geometric, grid, radial
TILE_FILL_ALPHA = "60"   # ~37.5%: tessellation

FRACTAL_SEGMENT_BUDGET = 20_000


# ---------------------------- Utilities ------------------------------------

def hex_to_rgba(hex_color: str) -> Tuple[int, int, int, int]:
    """Convert '#RRGGBB', '#RRGGBBAA' or shorthand '#RGB' to (r, g, b, a)."""
    h = hex_color.strip().lstrip("#")
    if len(h) == 3:
        h = "".join(c*2 for c in h)
    if len(h) == 6:
        h += "ff"
    if len(h) != 8:
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    try:
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16), int(h[6:8], 16))
    except ValueError:
        raise ValueError(f"Invalid hex color: {hex_color!r}") from None


def normalize_hex(hex_color: str) -> str:
    """Return the canonical lowercase '#rrggbb' form of an opaque color."""
    r, g, b, a = hex_to_rgba(hex_color)
    if a != 255:
        raise ValueError(f"Palette colors must be opaque '#rrggbb', got {hex_color!r}")
    return f"#{r:02x}{g:02x}{b:02x}"


def translucent(color: str, alpha: str = FILL_ALPHA) -> str:
    """Append a two-digit hex alpha suffix, e.g. '#667eea' -> '#667eea80'."""
    return normalize_hex(color) + alpha


def rng_from_seed(seed: Optional[int]) -> random.Random:
    """Return a Random instance from seed (or system)."""
    r = random.Random()
    if seed is not None:
        r.seed(int(seed))
    else:
        r.seed()
    return r


# ---------------------------- Geometry helpers ------------------------------

def polygon_points(sides: int, radius: float) -> List[Point]:
    """Vertices of a regular polygon around the origin, first vertex at angle 0."""
    angles = np.arange(sides) / sides * 2*math.pi
    return list(zip((np.cos(angles) * radius).tolist(), (np.sin(angles) * radius).tolist()))


def star_points(points: int, outer: float, inner: float) -> List[Point]:
    """A star with ``points`` vertices alternating between outer and inner radius."""
    angles = np.arange(points) / points * 2*math.pi
    radii = np.where(np.arange(points) % 2 == 0, outer, inner)
    return list(zip((np.cos(angles) * radii).tolist(), (np.sin(angles) * radii).tolist()))


def arc_points(cx: float, cy: float, radius: float, start: float, end: float,
               steps: Optional[int] = None) -> List[Point]:
    """Points along a circular arc, angles in radians, clockwise on screen."""
    if steps is None:
        # one vertex every 2 degrees
        steps = max(4, math.ceil(abs(end - start) / math.radians(2)))
    t = np.linspace(start, end, steps + 1)
    return list(zip((cx + np.cos(t) * radius).tolist(), (cy + np.sin(t) * radius).tolist()))


def cubic_bezier_points(p0: Point, p1: Point, p2: Point, p3: Point, steps: int = 24) -> List[Point]:
    """Flatten one cubic Bézier segment into a polyline (p0 included)."""
    t = np.linspace(0.0, 1.0, steps + 1)[:, None]
    pts = (
        (1 - t)**3 * np.asarray(p0)
        + 3 * (1 - t)**2 * t * np.asarray(p1)
        + 3 * (1 - t) * t**2 * np.asarray(p2)
        + t**3 * np.asarray(p3)
    )
    return list(map(tuple, pts.tolist()))


# ---------------------------- Drawing surface -------------------------------

class Surface:
    """A fixed-size RGB raster with a canvas-style transform stack.

    All coordinates passed to the drawing methods are in the current local
    space; they are mapped through the current affine transform before Pillow
    rasterizes them. Stroke widths are scaled by the transform's scale factor.
    Colors with an alpha suffix are blended onto what is already drawn.
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT,
                 background: str = BACKGROUND):
        if width <= 0 or height <= 0:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.background = background
        self.image = Image.new("RGB", (self.width, self.height), hex_to_rgba(background)[:3])
        self._draw = ImageDraw.Draw(self.image, "RGBA")
        self._matrix = np.identity(3)
        self._stack: List[np.ndarray] = []

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    # -- transform stack ----------------------------------------------------

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix.copy()

    def save(self) -> None:
        self._stack.append(self._matrix.copy())

    def restore(self) -> None:
        # Like a 2D canvas, restoring with nothing saved is a no-op.
        if self._stack:
            self._matrix = self._stack.pop()

    @contextmanager
    def saved(self) -> Iterator["Surface"]:
        self.save()
        try:
            yield self
        finally:
            self.restore()

    def reset_transform(self) -> None:
        self._matrix = np.identity(3)
        self._stack.clear()

    def translate(self, dx: float, dy: float) -> None:
        self._matrix = self._matrix @ np.array([[1.0, 0.0, dx], [0.0, 1.0, dy], [0.0, 0.0, 1.0]])

    def rotate(self, angle_rad: float) -> None:
        ca, sa = math.cos(angle_rad), math.sin(angle_rad)
        self._matrix = self._matrix @ np.array([[ca, -sa, 0.0], [sa, ca, 0.0], [0.0, 0.0, 1.0]])

    def scale(self, sx: float, sy: Optional[float] = None) -> None:
        if sy is None:
            sy = sx
        self._matrix = self._matrix @ np.array([[sx, 0.0, 0.0], [0.0, sy, 0.0], [0.0, 0.0, 1.0]])

    def transform_points(self, points: Sequence[Point]) -> List[Point]:
        pts = np.asarray(points, dtype=float).reshape(-1, 2)
        mapped = pts @ self._matrix[:2, :2].T + self._matrix[:2, 2]
        return list(map(tuple, mapped.tolist()))

    def _line_width(self, width: float) -> int:
        factor = math.sqrt(abs(np.linalg.det(self._matrix[:2, :2])))
        return max(1, int(round(width * factor)))

    # -- primitives ---------------------------------------------------------

    def clear(self, color: Optional[str] = None) -> None:
        """Reset the transform stack and paint the whole surface."""
        self.reset_transform()
        self._draw.rectangle([0, 0, self.width, self.height], fill=hex_to_rgba(color or self.background))

    def fill_rect(self, x: float, y: float, w: float, h: float, color: str) -> None:
        corners = [(x, y), (x + w, y), (x + w, y + h), (x, y + h)]
        self._draw.polygon(self.transform_points(corners), fill=hex_to_rgba(color))

    def fill_polygon(self, points: Sequence[Point], color: str) -> None:
        self._draw.polygon(self.transform_points(points), fill=hex_to_rgba(color))

    def _stroke(self, pts: List[Point], color: str, width: float) -> None:
        rgba = hex_to_rgba(color)
        width_px = self._line_width(width)
        if rgba[3] == 255:
            self._draw.line(pts, fill=rgba, width=width_px, joint="curve")
            return
        # Translucent strokes go through a coverage mask so overlapping
        # segments and joints are blended once, like a canvas path stroke.
        arr = np.asarray(pts)
        pad = width_px + 2
        x0 = max(int(math.floor(arr[:, 0].min())) - pad, 0)
        y0 = max(int(math.floor(arr[:, 1].min())) - pad, 0)
        x1 = min(int(math.ceil(arr[:, 0].max())) + pad, self.width)
        y1 = min(int(math.ceil(arr[:, 1].max())) + pad, self.height)
        if x1 <= x0 or y1 <= y0:
            return
        mask = Image.new("L", (x1 - x0, y1 - y0), 0)
        local = [(x - x0, y - y0) for x, y in pts]
        ImageDraw.Draw(mask).line(local, fill=rgba[3], width=width_px, joint="curve")
        self.image.paste(rgba[:3], (x0, y0, x1, y1), mask)

    def stroke_polygon(self, points: Sequence[Point], color: str, width: float = 1) -> None:
        pts = self.transform_points(points)
        self._stroke(pts + [pts[0]], color, width)

    def stroke_polyline(self, points: Sequence[Point], color: str, width: float = 1) -> None:
        self._stroke(self.transform_points(points), color, width)

    def fill_circle(self, cx: float, cy: float, radius: float, color: str) -> None:
        pts = arc_points(cx, cy, radius, 0.0, 2*math.pi)[:-1]
        self._draw.polygon(self.transform_points(pts), fill=hex_to_rgba(color))

    def stroke_arc(self, cx: float, cy: float, radius: float, start: float, end: float,
                   color: str, width: float = 1) -> None:
        self.stroke_polyline(arc_points(cx, cy, radius, start, end), color, width)

    def stroke_bezier(self, start: Point, segments: Sequence[Tuple[Point, Point, Point]],
                      color: str, width: float = 1) -> None:
        """Stroke a path of cubic Bézier segments, each (control1, control2, end)."""
        pts: List[Point] = [start]
        current = start
        for c1, c2, end in segments:
            pts.extend(cubic_bezier_points(current, c1, c2, end)[1:])
            current = end
        self.stroke_polyline(pts, color, width)

    # -- read-back ----------------------------------------------------------

    def to_png_bytes(self) -> bytes:
        buf = io.BytesIO()
        self.image.save(buf, format="PNG", optimize=True)
        return buf.getvalue()

    def is_blank(self) -> bool:
        """True when every pixel still has the background color."""
        bg = np.array(hex_to_rgba(self.background)[:3], dtype=np.uint8)
        return bool(np.all(np.asarray(self.image) == bg))


# ---------------------------- Configuration ---------------------------------

PATTERN_TYPES = ("geometric", "organic", "grid", "radial", "fractal", "tessellation")

# name -> (min, max, step) as offered to a UI
PARAMETER_RANGES: Dict[str, Tuple[float, float, float]] = {
    "density": (10, 100, 1),
    "complexity": (1, 10, 1),
    "symmetry": (2, 12, 1),
    "scale": (0.5, 2.0, 0.1),
    "rotation": (0, 360, 1),
}
INT_FIELDS = ("density", "complexity", "symmetry", "rotation")
MIN_COLORS = 3
MAX_COLORS = 8

DEFAULT_COLOR_SCHEME = ("#667eea", "#764ba2", "#f093fb", "#4facfe")

CURATED_PALETTES: Tuple[Tuple[str, ...], ...] = (
    ("#667eea", "#764ba2", "#f093fb", "#4facfe"),
    ("#fa709a", "#fee140", "#30cfd0", "#330867"),
    ("#a8edea", "#fed6e3", "#ff6e7f", "#bfe9ff"),
    ("#f857a6", "#ff5858", "#feca57", "#48dbfb"),
    ("#00d2ff", "#3a7bd5", "#f093fb", "#f5576c"),
)


@dataclass(frozen=True)
class PatternConfig:
    """The seven tunable parameters. Validated on construction, never mutated."""
    type: str = "geometric"
    density: int = 50
    complexity: int = 5
    color_scheme: Tuple[str, ...] = DEFAULT_COLOR_SCHEME
    symmetry: int = 4
    scale: float = 1.0
    rotation: int = 0

    def __post_init__(self):
        problems = []
        if self.type not in PATTERN_TYPES:
            problems.append(f"type must be one of {list(PATTERN_TYPES)}, got {self.type!r}")
        for name, (lo, hi, _step) in PARAMETER_RANGES.items():
            value = getattr(self, name)
            if name in INT_FIELDS:
                if isinstance(value, bool) or not isinstance(value, int):
                    problems.append(f"{name} must be an integer, got {value!r}")
                    continue
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                problems.append(f"{name} must be a number, got {value!r}")
                continue
            if not lo <= value <= hi:
                problems.append(f"{name} must be within [{lo}, {hi}], got {value!r}")
        if not isinstance(self.color_scheme, (list, tuple)):
            problems.append(f"color_scheme must be a sequence of hex colors, got {self.color_scheme!r}")
        else:
            colors = []
            for c in self.color_scheme:
                try:
                    colors.append(normalize_hex(c))
                except (ValueError, AttributeError):
                    problems.append(f"invalid palette color {c!r}")
            if not MIN_COLORS <= len(self.color_scheme) <= MAX_COLORS:
                problems.append(
                    f"color_scheme needs {MIN_COLORS}-{MAX_COLORS} colors, got {len(self.color_scheme)}"
                )
            object.__setattr__(self, "color_scheme", tuple(colors))
        if problems:
            raise ValueError("Invalid pattern config: " + "; ".join(problems))
        object.__setattr__(self, "scale", float(self.scale))

    @classmethod
    def clamped(cls, **values) -> "PatternConfig":
        """Build a config, pulling numeric fields into their allowed ranges.

        Integer fields are rounded, palettes longer than the maximum are
        truncated. An unknown type or a too-short palette still raises.
        """
        for name, (lo, hi, _step) in PARAMETER_RANGES.items():
            if name not in values:
                continue
            v = min(max(float(values[name]), lo), hi)
            values[name] = int(round(v)) if name in INT_FIELDS else v
        if isinstance(values.get("color_scheme"), (list, tuple)):
            values["color_scheme"] = tuple(values["color_scheme"])[:MAX_COLORS]
        return cls(**values)

    def with_changes(self, **changes) -> "PatternConfig":
        """Return a new config with some fields replaced (and re-validated)."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        d = dataclasses.asdict(self)
        d["color_scheme"] = list(self.color_scheme)
        return d

    @classmethod
    def from_dict(cls, data: dict, clamp: bool = False) -> "PatternConfig":
        """Build from a mapping such as a JSON config file.

        Accepts ``colorScheme`` as an alias of ``color_scheme``.
        """
        data = dict(data)
        if "colorScheme" in data:
            if "color_scheme" in data:
                raise ValueError("Give either color_scheme or colorScheme, not both")
            data["color_scheme"] = data.pop("colorScheme")
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys: {unknown}")
        if isinstance(data.get("color_scheme"), (list, tuple)):
            data["color_scheme"] = tuple(data["color_scheme"])
        return cls.clamped(**data) if clamp else cls(**data)


# ---------------------------- Pattern routines ------------------------------

def _place(surface: Surface, x: float, y: float, degrees: float, scale: float) -> None:
    surface.translate(x, y)
    surface.rotate(math.radians(degrees))
    surface.scale(scale)


def draw_geometric(rng: random.Random, surface: Surface, config: PatternConfig) -> None:
    W, H = surface.size
    size_range = config.complexity * 20
    for _ in range(config.density // 2):
        x = rng.random() * W
        y = rng.random() * H
        size = rng.random() * size_range + 20
        color = rng.choice(config.color_scheme)
        sides = rng.randrange(config.complexity) + 3
        with surface.saved():
            _place(surface, x, y, config.rotation + rng.random() * 360, config.scale)
            pts = polygon_points(sides, size)
            surface.fill_polygon(pts, translucent(color))
            surface.stroke_polygon(pts, color, width=2)


def draw_organic(rng: random.Random, surface: Surface, config: PatternConfig) -> None:
    W, H = surface.size

    def coord() -> float:
        return rng.random() * 100 - 50

    for _ in range(config.density // 3):
        x = rng.random() * W
        y = rng.random() * H
        color = rng.choice(config.color_scheme)
        with surface.saved():
            _place(surface, x, y, config.rotation + rng.random() * 360, config.scale)
            segments = [
                ((coord(), coord()), (coord(), coord()), (coord(), coord()))
                for _ in range(config.complexity + 3)
            ]
            surface.stroke_bezier((0.0, 0.0), segments, color, width=config.complexity)


def grid_layout(width: int, height: int, density: int) -> Tuple[int, int, int]:
    """(cell_size, rows, cols) for the grid mosaic."""
    cell = max(20, 100 - density)
    return cell, height // cell, width // cell


def draw_grid(rng: random.Random, surface: Surface, config: PatternConfig) -> None:
    cell, rows, cols = grid_layout(surface.width, surface.height, config.density)
    half = cell / 2
    for i in range(rows):
        for j in range(cols):
            if rng.random() <= 0.3:
                continue
            color = rng.choice(config.color_scheme)
            with surface.saved():
                _place(surface, j*cell + half, i*cell + half, config.rotation + (i + j) * 15, config.scale)
                motif = rng.randrange(config.complexity)
                if motif == 0:
                    surface.fill_rect(-half, -half, cell, cell, translucent(color))
                elif motif == 1:
                    surface.fill_circle(0, 0, half, translucent(color))
                elif motif == 2:
                    surface.fill_polygon([(-half, -half), (half, -half), (0, half)], translucent(color))
                else:
                    surface.stroke_polyline([(-half, -half), (half, half)], color, width=2)
                    surface.stroke_polyline([(half, -half), (-half, half)], color, width=2)


def draw_radial(rng: random.Random, surface: Surface, config: PatternConfig) -> None:
    W, H = surface.size
    max_radius = min(W, H) / 2
    segments = config.symmetry * 2
    span = 2*math.pi / segments
    palette = config.color_scheme
    with surface.saved():
        _place(surface, W / 2, H / 2, config.rotation, config.scale)
        for i in range(segments):
            angle = i / segments * 2*math.pi
            color = translucent(palette[i % len(palette)])
            for j in range(config.complexity):
                radius = (j + 1) * (max_radius / config.complexity)
                surface.stroke_arc(0, 0, radius, angle, angle + span, color, width=config.density / 2)


def fractal_segments(config: PatternConfig,
                     budget: int = FRACTAL_SEGMENT_BUDGET) -> Iterator[Tuple[Point, Point, int]]:
    """Yield the branches of the fractal tree as (start, end, depth), breadth-first.

    Coordinates are local to the tree root. At most ``budget`` branches are
    produced, so the shallow levels are always complete.
    """
    spread = (math.pi / 4) * (config.symmetry / 4)
    queue = deque([((0.0, 0.0), float(config.density * 2), -math.pi / 2, config.complexity)])
    drawn = 0
    while queue and drawn < budget:
        (x, y), length, heading, depth = queue.popleft()
        if depth == 0 or length < 2:
            continue
        x2 = x + math.cos(heading) * length
        y2 = y + math.sin(heading) * length
        yield (x, y), (x2, y2), depth
        drawn += 1
        child_length = length * 0.7
        if depth - 1 == 0 or child_length < 2:
            continue
        for i in range(config.symmetry):
            if drawn + len(queue) >= budget:
                break
            queue.append(((x2, y2), child_length, heading + spread * (i - config.symmetry / 2), depth - 1))
    if queue:
        logger.debug("fractal truncated at %d segments (%d pending)", drawn, len(queue))


def draw_fractal(rng: random.Random, surface: Surface, config: PatternConfig) -> None:
    W, H = surface.size
    palette = config.color_scheme
    with surface.saved():
        _place(surface, W / 2, H / 2, config.rotation, config.scale)
        for start, end, depth in fractal_segments(config):
            surface.stroke_polyline([start, end], palette[depth % len(palette)], width=depth)


def tessellation_layout(width: int, height: int, density: int) -> Tuple[int, int, int]:
    """(tile_size, rows, cols); tiles span row/col indices -1 .. rows-1 / cols-1."""
    tile = max(30, 120 - density)
    return tile, math.ceil(height / tile) + 1, math.ceil(width / tile) + 1


def tile_points(complexity: int, tile: float) -> List[Point]:
    if complexity <= 3:
        return polygon_points(6, tile / 2)
    if complexity <= 6:
        return star_points(10, tile / 2, tile / 4)
    return polygon_points(complexity + 3, tile / 2)


def draw_tessellation(rng: random.Random, surface: Surface, config: PatternConfig) -> None:
    tile, rows, cols = tessellation_layout(surface.width, surface.height, config.density)
    palette = config.color_scheme
    pts = tile_points(config.complexity, tile)
    for i in range(-1, rows):
        for j in range(-1, cols):
            color = palette[(i + j) % len(palette)]
            with surface.saved():
                _place(surface, j*tile + tile / 2, i*tile + tile / 2,
                       config.rotation + (i + j) * 30, config.scale)
                surface.fill_polygon(pts, translucent(color, TILE_FILL_ALPHA))
                surface.stroke_polygon(pts, color, width=2)


PATTERNS: Dict[str, Callable[[random.Random, Surface, PatternConfig], None]] = {
    "geometric": draw_geometric,
    "organic": draw_organic,
    "grid": draw_grid,
    "radial": draw_radial,
    "fractal": draw_fractal,
    "tessellation": draw_tessellation,
}


# ---------------------------- High-level API --------------------------------

def render(config: PatternConfig, surface: Surface, rng: Optional[random.Random] = None) -> None:
    """Clear ``surface`` to white and paint the pattern described by ``config``."""
    if surface is None:
        raise ValueError("render() needs a drawing surface")
    draw_fn = PATTERNS.get(config.type)
    if not draw_fn:
        raise ValueError(f"Unknown pattern type: {config.type!r}. Choose from {list(PATTERNS)}")
    if rng is None:
        rng = rng_from_seed(None)
    started = time.perf_counter()
    surface.clear(BACKGROUND)
    draw_fn(rng, surface, config)
    logger.debug("rendered %s in %.1f ms: %s", config.type,
                 (time.perf_counter() - started) * 1000, config)


def randomize(rng: Optional[random.Random] = None) -> PatternConfig:
    """A fresh random configuration for "surprise me" interactions."""
    if rng is None:
        rng = rng_from_seed(None)
    return PatternConfig(
        type=rng.choice(PATTERN_TYPES),
        density=rng.randrange(20, 100),
        complexity=rng.randrange(2, 10),
        color_scheme=rng.choice(CURATED_PALETTES),
        symmetry=rng.randrange(2, 10),
        scale=rng.random() * 1.5 + 0.5,
        rotation=rng.randrange(360),
    )


def suggested_filename(pattern_type: str, timestamp_ms: Optional[int] = None) -> str:
    """'pattern-<type>-<unix millis>.png'."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"pattern-{pattern_type}-{int(timestamp_ms)}.png"


def export_png(surface: Surface) -> bytes:
    return surface.to_png_bytes()


def save_png(surface: Surface, path: str) -> str:
    surface.image.save(path, format="PNG", optimize=True)
    logger.info("saved %dx%d pattern to %s", surface.width, surface.height, path)
    return path


class PatternSession:
    """Holds the current config and surface; every replacement re-renders once."""

    def __init__(self, config: Optional[PatternConfig] = None, surface: Optional[Surface] = None,
                 rng: Optional[random.Random] = None):
        self.config = config or PatternConfig()
        self.surface = surface or Surface()
        self.rng = rng or rng_from_seed(None)
        self.renders = 0
        self._render()

    def _render(self) -> None:
        render(self.config, self.surface, self.rng)
        self.renders += 1

    def set_config(self, config: PatternConfig) -> PatternConfig:
        self.config = config
        self._render()
        return config

    def update(self, **changes) -> PatternConfig:
        """Replace some fields of the current config and re-render."""
        return self.set_config(self.config.with_changes(**changes))

    def randomize(self) -> PatternConfig:
        return self.set_config(randomize(self.rng))

    def export(self, timestamp_ms: Optional[int] = None) -> Tuple[bytes, str]:
        return export_png(self.surface), suggested_filename(self.config.type, timestamp_ms)


def generate(
    out_path: str,
    config: Optional[PatternConfig] = None,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    seed: Optional[int] = None,
) -> str:
    """High-level convenience. Returns the out_path after saving."""
    surface = Surface(width, height)
    render(config or PatternConfig(), surface, rng_from_seed(seed))
    return save_png(surface, out_path)


# ---------------------------- CLI -------------------------------------------

def parse_size(s: str) -> Tuple[int, int]:
    if "x" not in s.lower():
        raise argparse.ArgumentTypeError("Size must be like 800x600")
    a, b = s.lower().split("x", 1)
    try:
        w, h = int(a), int(b)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Size must be like 800x600, got {s!r}") from None
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError("Size must be positive")
    return (w, h)


def _range_help(name: str) -> str:
    lo, hi, step = PARAMETER_RANGES[name]
    return f"{lo}..{hi}" + (f" step {step}" if name == "scale" else "")


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Render procedural pattern PNGs")
    ap.add_argument("--out", default=None, help="Output PNG path (default: pattern-<type>-<millis>.png)")
    ap.add_argument("--out-dir", default=".", help="Directory for the default file name")
    ap.add_argument("--size", type=parse_size, default=(DEFAULT_WIDTH, DEFAULT_HEIGHT),
                    help="WIDTHxHEIGHT (e.g., 800x600)")
    ap.add_argument("--config", default=None, help="Path to a JSON file with pattern parameters")
    ap.add_argument("--randomize", action="store_true", help="Start from a random configuration")
    ap.add_argument("--type", choices=PATTERN_TYPES, default=None)
    ap.add_argument("--density", type=int, default=None, help=_range_help("density"))
    ap.add_argument("--complexity", type=int, default=None, help=_range_help("complexity"))
    ap.add_argument("--symmetry", type=int, default=None, help=_range_help("symmetry"))
    ap.add_argument("--scale", type=float, default=None, help=_range_help("scale"))
    ap.add_argument("--rotation", type=int, default=None, help=_range_help("rotation") + " degrees")
    ap.add_argument("--palette", default=None, help="Comma-separated hex colors (3-8)")
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--log-level", default="WARNING",
                    choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = ap.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(levelname)-5s %(name)s: %(message)s")

    rng = rng_from_seed(args.seed)
    try:
        config = randomize(rng) if args.randomize else PatternConfig()
        if args.config:
            with open(args.config, "r") as jf:
                data = json.load(jf)
            if not isinstance(data, dict):
                ap.error("--config JSON must be an object of pattern parameters")
            base = config.to_dict()
            if "colorScheme" in data:
                del base["color_scheme"]
            config = PatternConfig.from_dict({**base, **data})
        overrides = {
            name: getattr(args, name)
            for name in ("type", "density", "complexity", "symmetry", "scale", "rotation")
            if getattr(args, name) is not None
        }
        if args.palette:
            overrides["color_scheme"] = tuple(c.strip() for c in args.palette.split(",") if c.strip())
        config = config.with_changes(**overrides)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        ap.error(str(e))

    out = args.out or os.path.join(args.out_dir, suggested_filename(config.type))
    width, height = args.size
    surface = Surface(width, height)
    render(config, surface, rng)
    save_png(surface, out)
    print(out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
