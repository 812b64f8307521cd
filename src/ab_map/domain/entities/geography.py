import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
from shapely.geometry import LineString

from ab_map.domain.errors import DegenerateGeometry

# Shorter than this and a Line has no usable direction.
EPSILON_DIST = 1e-6


# Core geometry types used by the map builders
@dataclass(frozen=True, order=True)
class Point:
    x: float  # lon for raw input, meters once projected
    y: float

    def dist_to(self, other: "Point") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def approx_eq(self, other: "Point", threshold: float) -> bool:
        return self.dist_to(other) < threshold

    @classmethod
    def center(cls, pts: Sequence["Point"]) -> "Point":
        arr = np.array([(p.x, p.y) for p in pts], dtype=float)
        cx, cy = arr.mean(axis=0)
        return cls(float(cx), float(cy))


@dataclass(frozen=True)
class Line:
    pt1: Point
    pt2: Point

    @classmethod
    def new(cls, pt1: Point, pt2: Point) -> "Line":
        if pt1.dist_to(pt2) < EPSILON_DIST:
            raise DegenerateGeometry(f"zero-length line at {pt1}")
        return cls(pt1, pt2)

    @property
    def length(self) -> float:
        return self.pt1.dist_to(self.pt2)

    def percent_along(self, f: float) -> Point:
        return Point(
            self.pt1.x + f * (self.pt2.x - self.pt1.x),
            self.pt1.y + f * (self.pt2.y - self.pt1.y),
        )

    def reversed(self) -> "Line":
        return Line(self.pt2, self.pt1)

    def shift_right(self, width: float) -> "Line":
        L = self.length
        if L < EPSILON_DIST:
            raise DegenerateGeometry(f"can't shift zero-length line at {self.pt1}")
        # right-hand normal of (dx, dy) in a y-up frame
        nx, ny = (self.pt2.y - self.pt1.y) / L, -(self.pt2.x - self.pt1.x) / L
        return Line(
            Point(self.pt1.x + nx * width, self.pt1.y + ny * width),
            Point(self.pt2.x + nx * width, self.pt2.y + ny * width),
        )

    def shift_left(self, width: float) -> "Line":
        return self.shift_right(-width)

    def shift_either_direction(self, width: float) -> "Line":
        """Positive widths shift right, negative shift left."""
        return self.shift_right(width)

    def angle_degs(self) -> float:
        return math.degrees(math.atan2(self.pt2.y - self.pt1.y, self.pt2.x - self.pt1.x)) % 360.0


@dataclass(frozen=True)
class PolyLine:
    points: tuple[Point, ...]

    def __post_init__(self):
        if len(self.points) < 2:
            raise DegenerateGeometry(f"polyline needs >= 2 points, got {len(self.points)}")

    @classmethod
    def new(cls, pts: Iterable[Point]) -> "PolyLine":
        return cls(tuple(pts))

    @classmethod
    def deduping_new(cls, pts: Iterable[Point]) -> "PolyLine":
        return cls(tuple(dedupe_adjacent(pts)))

    @property
    def length(self) -> float:
        arr = np.array([(p.x, p.y) for p in self.points], dtype=float)
        return float(np.hypot(*np.diff(arr, axis=0).T).sum())

    def first_pt(self) -> Point:
        return self.points[0]

    def last_pt(self) -> Point:
        return self.points[-1]

    def first_line(self) -> Line:
        return Line.new(self.points[0], self.points[1])

    def last_line(self) -> Line:
        return Line.new(self.points[-2], self.points[-1])

    def reversed(self) -> "PolyLine":
        return PolyLine(self.points[::-1])

    def shift_right(self, width: float) -> "PolyLine":
        # shapely offsets positive distances to the left
        shifted = LineString([(p.x, p.y) for p in self.points]).offset_curve(
            -width, join_style="mitre"
        )
        if shifted.is_empty or shifted.geom_type != "LineString":
            raise DegenerateGeometry(f"offset by {width} produced {shifted.geom_type}")
        return PolyLine.deduping_new(Point(float(x), float(y)) for x, y in shifted.coords)

    def shift_left(self, width: float) -> "PolyLine":
        return self.shift_right(-width)


# --------------- point-list helpers -----------------------


def dedupe_adjacent(pts: Iterable[Point]) -> list[Point]:
    out: list[Point] = []
    for p in pts:
        if not out or out[-1] != p:
            out.append(p)
    return out


def approx_dedupe(pts: Iterable[Point], threshold: float) -> list[Point]:
    out: list[Point] = []
    for p in pts:
        if not out or not out[-1].approx_eq(p, threshold):
            out.append(p)
    return out


def contains_duplicates(pts: Sequence[Point]) -> bool:
    return len(set(pts)) != len(pts)


def ring_points(pts: Sequence[Point]) -> list[Point]:
    """Polygon vertices without the closing repeat of the first point."""
    out = list(pts)
    if len(out) > 1 and out[0] == out[-1]:
        out.pop()
    return out


def find_pts_between(
    pts: Sequence[Point], start: Point, end: Point, threshold: float
) -> list[Point] | None:
    """
    Walk the ring `pts` in order from the first vertex near `start` to the next
    vertex near `end`, wrapping around once. None if either is never matched.
    """
    result: list[Point] = []
    for p in pts:
        if not result and p.approx_eq(start, threshold):
            result.append(p)
        elif result:
            result.append(p)
        # start and end might be the same vertex
        if result and p.approx_eq(end, threshold):
            return result

    if not result:
        return None

    for p in pts:
        result.append(p)
        if p.approx_eq(end, threshold):
            return result
    return None


def path_length(pts: Sequence[Point]) -> float:
    if len(pts) < 2:
        return 0.0
    return PolyLine(tuple(pts)).length
