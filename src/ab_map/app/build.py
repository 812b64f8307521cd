# ab_map/app/build.py
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ab_map.app.protocols import Elevation
from ab_map.config.models import BuildModel
from ab_map.domain.entities.network import DrivingSide, Map, Turn, TurnID
from ab_map.domain.entities.raw import RawMap, RawRoad
from ab_map.io.build_logging import BuildLogging  # JSON logs
from ab_map.io.recorder import MemorySink, Recorder
from ab_map.make.hooks import BuildHooks, NoopHooks
from ab_map.make.split_ways import split_up_roads
from ab_map.make.walking_turns import make_all_walking_turns


@dataclass
class App:
    config: BuildModel
    hooks: BuildHooks
    recorder: Recorder | None = None

    @property
    def driving_side(self) -> DrivingSide:
        return DrivingSide(self.config.map.driving_side)

    def split(
        self,
        roads: Sequence[RawRoad],
        buildings: Sequence[Any] = (),
        areas: Sequence[Any] = (),
        *,
        elevation: Elevation,
    ) -> RawMap:
        return split_up_roads(
            roads,
            buildings,
            areas,
            elevation=elevation,
            roundabout=self.config.map.roundabout,
            hooks=self.hooks,
        )

    def walking_turns(self, m: Map) -> dict[TurnID, Turn]:
        return make_all_walking_turns(
            m, driving_side=self.driving_side, hooks=self.hooks, corners=self.config.map.corners
        )

    def add_walking_turns(self, m: Map) -> Map:
        m.add_turns(self.walking_turns(m).values())
        return m


def build(
    cfg: BuildModel | Mapping, *, use_logging: bool = True, recorder: Recorder | None = None
) -> App:
    # 0) Validate config
    model = cfg if isinstance(cfg, BuildModel) else BuildModel.model_validate(cfg)

    # 1) Hooks. Warnings are kept in memory unless the caller wants them elsewhere.
    if not use_logging:
        return App(config=model, hooks=NoopHooks())
    recorder = recorder or Recorder(MemorySink())
    hooks = BuildLogging(
        run_id=model.run_id,
        level=model.log.level,
        debug=model.log.debug,
        recorder=recorder,
    )
    return App(config=model, hooks=hooks, recorder=recorder)
