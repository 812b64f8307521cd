# main.py
import argparse
import json

from ab_map.app.build import build
from ab_map.app.protocols import FlatElevation
from ab_map.io.map_json import load_raw_input, raw_map_to_dict, write_json


def run(input_path: str, output_path: str, config_path: str | None = None) -> None:
    cfg = {"name": "cli"}
    if config_path:
        with open(config_path, encoding="utf-8") as f:
            cfg = json.load(f)
    app = build(cfg)

    roads, buildings, areas = load_raw_input(input_path)
    # Elevation sampling lives elsewhere; without it every intersection sits at 0 m.
    raw_map = app.split(roads, buildings, areas, elevation=FlatElevation())
    write_json(raw_map_to_dict(raw_map), output_path)


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Split surveyed ways into a road graph")
    ap.add_argument("input")
    ap.add_argument("output")
    ap.add_argument("--config", default=None)
    args = ap.parse_args()
    run(args.input, args.output, args.config)
