# io/build_logging.py
import json
import logging
import sys

from ab_map.io.build_events import GeometryWarning, SplitSummary
from ab_map.io.recorder import Recorder
from ab_map.make.hooks import NoopHooks, WarnReason


def _default_json_logger(name="ab_map", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)

        class _JsonFormatter(logging.Formatter):
            def format(self, record: logging.LogRecord) -> str:
                payload = {
                    "level": record.levelname,
                    "msg": record.getMessage(),
                    "logger": record.name,
                }
                extra = getattr(record, "extra", None)
                if isinstance(extra, dict):
                    payload.update(extra)
                return json.dumps(payload, default=str)

        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class BuildLogging(NoopHooks):
    """
    One place to shape and emit structured logs for a map build, and to hand
    warnings to the recorder for later analysis.
    """

    def __init__(
        self,
        run_id: str = "local",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.debug, self.recorder = run_id, debug, recorder
        self.log = logger or _default_json_logger(level=level)
        self.warnings = 0
        self._split: dict[str, int] = {}

    # --------------- Helpers -----------------------------

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _record(self, ev):
        if self.recorder:
            self.recorder.emit(ev)

    # --------------------------------------------------------

    # splitting

    def split_start(self, *, roads: int, roundabouts: int):
        self._split = {"raw_roads": roads, "roundabouts": roundabouts}
        self._emit("INFO", "split_start", roads=roads, roundabouts=roundabouts)

    def split_end(self, *, intersections: int, roads: int):
        self._emit("INFO", "split_end", intersections=intersections, roads=roads)
        self._record(
            SplitSummary(
                run_id=self.run_id,
                name="split_summary",
                raw_roads=self._split.get("raw_roads", 0),
                roundabouts=self._split.get("roundabouts", 0),
                intersections=intersections,
                roads=roads,
            )
        )

    # turns

    def turns_start(self, *, intersection: int, degree: int):
        if self.debug:
            self._emit("DEBUG", "turns_start", intersection=intersection, degree=degree)

    def turns_end(self, *, intersection: int, turns: int):
        if self.debug:
            self._emit("DEBUG", "turns_end", intersection=intersection, turns=turns)

    def warn(self, reason: WarnReason, *, intersection: int, l1: int, l2: int, **kw):
        self.warnings += 1
        self._emit("WARNING", reason, intersection=intersection, l1=l1, l2=l2, **kw)
        self._record(
            GeometryWarning(
                run_id=self.run_id,
                name="geometry_warning",
                intersection=intersection,
                l1=l1,
                l2=l2,
                reason=reason,
                detail=dict(kw),
            )
        )
