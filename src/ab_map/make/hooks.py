# make/hooks.py
from typing import Literal, Protocol

WarnReason = Literal[
    "duplicate_traced_points",
    "smoothing_failed",
    "duplicate_final_points",
    "corner_too_long",
    "offset_failed",
    "degenerate_crosswalk",
    "degenerate_midpoints",
    "missing_sidewalk",
]


class BuildHooks(Protocol):
    def split_start(self, *, roads, roundabouts): ...
    def split_end(self, *, intersections, roads): ...
    def turns_start(self, *, intersection, degree): ...
    def turns_end(self, *, intersection, turns): ...
    def warn(self, reason: WarnReason, *, intersection: int, l1: int, l2: int, **kw): ...


class NoopHooks:
    def split_start(self, **_):
        pass

    def split_end(self, **_):
        pass

    def turns_start(self, **_):
        pass

    def turns_end(self, **_):
        pass

    def warn(self, *_, **__):
        pass
