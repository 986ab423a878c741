# src/pathpaint/app/maps.py
import json
import logging
from pathlib import Path
from typing import Optional, Union

from pathpaint.core.grid import Grid
from pathpaint.core.types import Position

logger = logging.getLogger(__name__)

MAP_DIR = Path(__file__).resolve().parents[1] / "maps"   # presets shipped inside the package


def _endpoint(data: dict, key: str) -> Optional[Position]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, (list, tuple)) or len(value) != 2 or not all(isinstance(v, int) for v in value):
        raise ValueError(f"{key} must be [x, y], got {value!r}")
    return (int(value[0]), int(value[1]))


def load_map(path: Union[str, Path]) -> Grid:
    """
    Load a JSON map:
        {"width": W, "height": H, "cells": [[0|1, ...], ...], "spawn": [x, y], "target": [x, y]}
    cells is [row][col] with 1 marking a wall; spawn and target are optional.
    """
    with open(path, "r") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"map must be a JSON object, got {type(data).__name__}")
    width = data.get("width")
    height = data.get("height")
    if not isinstance(width, int) or not isinstance(height, int):
        raise ValueError(f"width and height must be integers, got {width!r} and {height!r}")
    cells = data.get("cells")
    if not isinstance(cells, list) or not all(isinstance(r, list) for r in cells):
        raise ValueError("cells must be a list of rows")
    if len(cells) != height or any(len(r) != width for r in cells):
        raise ValueError(f"cells size mismatch, expected {width}x{height}")
    grid = Grid.from_rows(cells, spawn=_endpoint(data, "spawn"), target=_endpoint(data, "target"))
    logger.info("Loaded %dx%d map from %s", width, height, path)
    return grid


def save_map(grid: Grid, path: Union[str, Path]) -> Path:
    path = Path(path)
    data = {
        "width": grid.width,
        "height": grid.height,
        "cells": grid.to_rows(),
        "spawn": list(grid.spawn) if grid.spawn is not None else None,
        "target": list(grid.target) if grid.target is not None else None,
    }
    if path.parent:
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f)
    logger.info("Saved map to %s", path)
    return path
