# make/roundabouts.py
"""
Collapse roundabout ways into a single point.

Every point on a roundabout maps to the roundabout's center. Ways touching a
roundabout get the center inserted at that end, so once the map is split the
whole roundabout looks like one intersection.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType

from ab_map.config.models import RoundaboutModel
from ab_map.domain.entities.geography import Point
from ab_map.domain.entities.raw import RawRoad


@dataclass(frozen=True)
class RemappedRoad:
    source: RawRoad
    points: tuple[Point, ...]
    added_to_start: bool = False
    added_to_end: bool = False

    @property
    def source_id(self) -> int:
        return self.source.source_id


@dataclass(frozen=True)
class RoundaboutRemap:
    roads: tuple[RemappedRoad, ...]
    centers: Mapping[Point, Point]  # roundabout point -> center
    num_roundabouts: int

    def is_roundabout_pt(self, pt: Point) -> bool:
        return pt in self.centers


def collapse_roundabouts(
    roads: Sequence[RawRoad], cfg: RoundaboutModel | None = None
) -> RoundaboutRemap:
    cfg = cfg or RoundaboutModel()

    centers: dict[Point, Point] = {}
    kept: list[RawRoad] = []
    n = 0
    for r in roads:
        if r.has_tag(cfg.tag, cfg.value):
            center = Point.center(r.points)
            for pt in r.points:
                centers[pt] = center
            n += 1
        else:
            kept.append(r)

    remapped = tuple(_remap(r, centers) for r in kept)
    return RoundaboutRemap(roads=remapped, centers=MappingProxyType(centers), num_roundabouts=n)


def _remap(r: RawRoad, centers: Mapping[Point, Point]) -> RemappedRoad:
    pts = list(r.points)
    # a way already ending on the center doesn't need it again
    start_center = centers.get(pts[0])
    if start_center == pts[0]:
        start_center = None
    end_center = centers.get(pts[-1])
    if end_center == pts[-1]:
        end_center = None
    if start_center is not None:
        pts.insert(0, start_center)
    if end_center is not None:
        pts.append(end_center)
    return RemappedRoad(
        source=r,
        points=tuple(pts),
        added_to_start=start_center is not None,
        added_to_end=end_center is not None,
    )
