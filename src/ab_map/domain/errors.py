# ab_map/domain/errors.py


class MapBuildError(Exception):
    """Base for everything the map builders raise."""


class InvalidTopology(MapBuildError):
    """Input breaks an assumption the splitter can't recover from. Fatal."""

    def __init__(self, source_id: int, index: int, length: int):
        self.source_id, self.index, self.length = source_id, index, length
        super().__init__(
            f"way {source_id} hits a roundabout not at an endpoint. idx {index} of length {length}"
        )


class RecoverableGeometryError(MapBuildError):
    """One turn can't be built; skip it (or fall back) and warn."""


class DegenerateGeometry(RecoverableGeometryError):
    pass
