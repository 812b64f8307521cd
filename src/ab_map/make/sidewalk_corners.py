# make/sidewalk_corners.py
"""
Geometry for walking around the corner of an intersection between two sidewalks.

The preferred path hugs the intersection polygon. Whenever that gets weird the
corner falls back to a straight line between the sidewalk ends, and says so
through the build hooks.
"""

from ab_map.config.models import CornerModel
from ab_map.domain.entities.geography import (
    Point,
    PolyLine,
    approx_dedupe,
    contains_duplicates,
    dedupe_adjacent,
    find_pts_between,
    path_length,
    ring_points,
)
from ab_map.domain.entities.network import DrivingSide, Intersection, Lane
from ab_map.domain.errors import DegenerateGeometry
from ab_map.make.hooks import BuildHooks


def trace_boundary(
    driving_side: DrivingSide, i: Intersection, start: Point, end: Point, threshold: float
) -> list[Point] | None:
    """Polygon vertices from `start` to `end`, along whichever way around is shorter."""
    ring = ring_points(i.polygon)
    # Intersection polygons are clockwise; left-handed maps walk them the other way.
    if driving_side is DrivingSide.LEFT:
        ring.reverse()
    fwd = find_pts_between(ring, start, end, threshold)
    if fwd is None:
        return None
    back = find_pts_between(ring[::-1], start, end, threshold)
    if back is not None and path_length(back) < path_length(fwd):
        return back
    return fwd


def make_shared_sidewalk_corner(
    driving_side: DrivingSide,
    i: Intersection,
    l1: Lane,
    l2: Lane,
    *,
    hooks: BuildHooks,
    cfg: CornerModel | None = None,
) -> PolyLine:
    cfg = cfg or CornerModel()
    baseline = PolyLine((l1.last_pt(), l2.first_pt()))

    def fallback(reason, **kw) -> PolyLine:
        hooks.warn(reason, intersection=i.id, l1=l1.id, l2=l2.id, **kw)
        return baseline

    try:
        corner1 = driving_side.right_shift_line(l1.last_line(), l1.width / 2.0).pt2
        corner2 = driving_side.right_shift_line(l2.first_line(), l2.width / 2.0).pt1
    except DegenerateGeometry as exc:
        return fallback("offset_failed", error=str(exc))

    # Scanning from corner2 to corner1, so this is built backwards and flipped below.
    pts_between = [l2.first_pt()]
    traced = trace_boundary(driving_side, i, corner2, corner1, cfg.match_threshold)
    if traced is not None:
        deduped = dedupe_adjacent(traced)
        if len(deduped) >= 2:
            if contains_duplicates(deduped):
                return fallback("duplicate_traced_points")
            try:
                shifted = driving_side.right_shift(
                    PolyLine.new(deduped), min(l1.width, l2.width) / 2.0
                )
            except DegenerateGeometry as exc:
                return fallback("offset_failed", error=str(exc))
            pts_between.extend(shifted.points)
    pts_between.append(l1.last_pt())
    pts_between.reverse()

    final_pts = approx_dedupe(pts_between, cfg.smoothing_threshold)
    if len(final_pts) < 2:
        return fallback("smoothing_failed")
    # Smoothing may have eaten the real end; it has to line up exactly with l2.
    if final_pts[-1] != l2.first_pt():
        final_pts[-1] = l2.first_pt()
    if contains_duplicates(final_pts):
        return fallback("duplicate_final_points")

    result = PolyLine.new(final_pts)
    if result.length > cfg.max_length_ratio * baseline.length:
        return fallback("corner_too_long", length=result.length)
    return result
