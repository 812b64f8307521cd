from typing import Protocol, runtime_checkable


@runtime_checkable
class Elevation(Protocol):
    """
    Height in meters at a raw (lon, lat). Sampled once per intersection, so it
    must be side-effect free.
    """

    def __call__(self, lon: float, lat: float) -> float: ...


class FlatElevation:
    def __init__(self, height_m: float = 0.0):
        self.height_m = height_m

    def __call__(self, lon: float, lat: float) -> float:
        return self.height_m
