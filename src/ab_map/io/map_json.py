# io/map_json.py
"""
Plain JSON in and out.

Input document:
  {"roads": [{"source_id": 1, "points": [[x, y], ...], "tags": {...}}, ...],
   "buildings": [...], "areas": [...]}
Buildings and areas are carried through untouched.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ab_map.domain.entities.geography import Point, PolyLine
from ab_map.domain.entities.network import Turn, TurnID
from ab_map.domain.entities.raw import RawMap, RawRoad


def _pt(p) -> Point:
    return Point(float(p[0]), float(p[1]))


def _pts(pl: PolyLine | tuple[Point, ...]) -> list[list[float]]:
    pts = pl.points if isinstance(pl, PolyLine) else pl
    return [[p.x, p.y] for p in pts]


def raw_input_from_dict(doc: Mapping[str, Any]) -> tuple[list[RawRoad], list, list]:
    roads = [
        RawRoad(
            source_id=int(r["source_id"]),
            points=tuple(_pt(p) for p in r["points"]),
            tags=dict(r.get("tags", {})),
        )
        for r in doc.get("roads", [])
    ]
    return roads, list(doc.get("buildings", [])), list(doc.get("areas", []))


def load_raw_input(path: str | Path) -> tuple[list[RawRoad], list, list]:
    with open(path, encoding="utf-8") as f:
        return raw_input_from_dict(json.load(f))


def raw_map_to_dict(m: RawMap) -> dict[str, Any]:
    return {
        "intersections": [
            {
                "id": i.id,
                "point": [i.point.x, i.point.y],
                "elevation_m": i.elevation_m,
                "intersection_type": i.intersection_type.value,
                "label": i.label,
            }
            for i in m.intersections.values()
        ],
        "roads": [
            {
                "id": r.id,
                "source_id": r.source_id,
                "i1": r.i1,
                "i2": r.i2,
                "points": _pts(r.points),
                "tags": dict(r.tags),
            }
            for r in m.roads.values()
        ],
        "buildings": list(m.buildings),
        "areas": list(m.areas),
    }


def _turn_id(t: TurnID) -> list[int]:
    return [t.parent, t.src, t.dst]


def turns_to_dict(turns: Mapping[TurnID, Turn]) -> list[dict[str, Any]]:
    return [
        {
            "id": _turn_id(t.id),
            "turn_type": t.turn_type.value,
            "geom": _pts(t.geom),
            "other_crosswalk_ids": [_turn_id(o) for o in sorted(t.other_crosswalk_ids)],
        }
        for _, t in sorted(turns.items())
    ]


def write_json(doc: Any, path: str | Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(doc, f, indent=2)
