# make/walking_turns.py
from ab_map.config.models import CornerModel
from ab_map.domain.entities.network import (
    DrivingSide,
    Intersection,
    Lane,
    Map,
    Road,
    Turn,
    TurnID,
    TurnType,
    turn_id,
)
from ab_map.make.crosswalks import get_sidewalk, make_crosswalks, make_degenerate_crosswalks
from ab_map.make.hooks import BuildHooks, NoopHooks
from ab_map.make.sidewalk_corners import make_shared_sidewalk_corner


def neighbor_at_offset(driving_side: DrivingSide, index: int, steps: int, count: int) -> int:
    """Index of the road `steps` away around the intersection, wrapping around."""
    return (index + steps * driving_side.offset) % count


class WalkingTurnBuilder:
    """Pedestrian turns for one intersection. Reads the map, never writes it."""

    def __init__(
        self,
        m: Map,
        i: Intersection,
        *,
        driving_side: DrivingSide,
        hooks: BuildHooks,
        corners: CornerModel,
    ):
        self.m, self.i, self.side, self.hooks, self.corners = m, i, driving_side, hooks, corners
        self.roads: list[Road] = [m.get_r(r) for r in i.roads]

    # --------------- Helpers -----------------------------

    def incoming(self, r: Road) -> Lane | None:
        return get_sidewalk(self.m.incoming_lanes(r, self.i.id))

    def outgoing(self, r: Road) -> Lane | None:
        return get_sidewalk(self.m.outgoing_lanes(r, self.i.id))

    def neighbor(self, idx: int, steps: int) -> Road:
        return self.roads[neighbor_at_offset(self.side, idx, steps, len(self.roads))]

    def shared_corner(self, l1: Lane, l2: Lane) -> list[Turn]:
        geom = make_shared_sidewalk_corner(
            self.side, self.i, l1, l2, hooks=self.hooks, cfg=self.corners
        )
        return [
            Turn(turn_id(self.i.id, l1.id, l2.id), TurnType.SHARED_SIDEWALK_CORNER, geom),
            Turn(
                turn_id(self.i.id, l2.id, l1.id), TurnType.SHARED_SIDEWALK_CORNER, geom.reversed()
            ),
        ]

    def crosswalks(self, l1: Lane, l2: Lane) -> list[Turn]:
        return make_crosswalks(self.i.id, l1, l2, hooks=self.hooks)

    # --------------------------------------------------------

    def build(self) -> list[Turn]:
        if not self.roads:
            return []
        if len(self.roads) == 1:
            return self._dead_end()
        if len(self.roads) == 2:
            return self._degenerate()
        return self._general()

    def _dead_end(self) -> list[Turn]:
        r = self.roads[0]
        l1, l2 = self.incoming(r), self.outgoing(r)
        if l1 is None or l2 is None:
            return []
        return self.shared_corner(l1, l2)

    def _degenerate(self) -> list[Turn]:
        result = make_degenerate_crosswalks(
            self.m, self.i.id, self.roads[0], self.roads[1], hooks=self.hooks
        )
        for idx1, r in enumerate(self.roads):
            l1 = self.incoming(r)
            if l1 is None:
                continue
            l2 = self.outgoing(self.neighbor(idx1, 1))
            if l2 is not None and l1.last_pt() != l2.first_pt():
                result.extend(self.shared_corner(l1, l2))
        return result

    def _general(self) -> list[Turn]:
        result: list[Turn] = []
        for idx1, r in enumerate(self.roads):
            l1 = self.incoming(r)
            if l1 is None:
                continue
            # Make the crosswalk to the other side
            l2 = self.outgoing(r)
            if l2 is not None:
                result.extend(self.crosswalks(l1, l2))
            result.extend(self._corner(idx1, l1))
        return result

    def _corner(self, idx1: int, l1: Lane) -> list[Turn]:
        adj = self.neighbor(idx1, 1)
        l2 = self.outgoing(adj)
        if l2 is not None:
            if l1.last_pt() == l2.first_pt():
                return []
            return self.shared_corner(l1, l2)

        # Adjacent road is missing a sidewalk on the near side, but has one on the far side
        l2 = self.incoming(adj)
        if l2 is not None:
            return self.crosswalks(l1, l2)

        # There might be a few roads without any sidewalks in the way -- think highway onramps.
        max_steps = 3 if len(self.roads) > 3 else 2
        for steps in range(2, max_steps + 1):
            r2 = self.neighbor(idx1, steps)
            for l2 in (self.outgoing(r2), self.incoming(r2)):
                if l2 is not None:
                    return self.crosswalks(l1, l2)
        return []


def make_walking_turns(
    m: Map,
    i: Intersection,
    *,
    driving_side: DrivingSide = DrivingSide.RIGHT,
    hooks: BuildHooks | None = None,
    corners: CornerModel | None = None,
) -> list[Turn]:
    hooks = hooks or NoopHooks()
    hooks.turns_start(intersection=i.id, degree=len(i.roads))
    turns = WalkingTurnBuilder(
        m, i, driving_side=driving_side, hooks=hooks, corners=corners or CornerModel()
    ).build()
    hooks.turns_end(intersection=i.id, turns=len(turns))
    return turns


def make_all_walking_turns(
    m: Map,
    *,
    driving_side: DrivingSide = DrivingSide.RIGHT,
    hooks: BuildHooks | None = None,
    corners: CornerModel | None = None,
) -> dict[TurnID, Turn]:
    table: dict[TurnID, Turn] = {}
    for i_id in sorted(m.intersections):
        for t in make_walking_turns(
            m, m.intersections[i_id], driving_side=driving_side, hooks=hooks, corners=corners
        ):
            table[t.id] = t
    return table
