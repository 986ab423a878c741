#!/usr/bin/env python3
"""
Startup settings.

- ENV: PATHPAINT_GRID=WxH, PATHPAINT_MAP=path, PATHPAINT_SAVE=path, PATHPAINT_SPEED=N, PATHPAINT_LOG_LEVEL=LEVEL
- CLI: --grid=WxH --map=path --save=path --speed=N --log-level=LEVEL (CLI wins over ENV)
"""

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence, Tuple

DEFAULT_GRID = (30, 30)
DEFAULT_SPEED = 30      # expansions per second while animating
DEFAULT_SAVE = Path("pathpaint-map.json")   # relative to the working directory
MIN_SPEED = 1
MAX_SPEED = 240

_ENV_KEYS = {
    "grid": "PATHPAINT_GRID",
    "map": "PATHPAINT_MAP",
    "save": "PATHPAINT_SAVE",
    "speed": "PATHPAINT_SPEED",
    "log-level": "PATHPAINT_LOG_LEVEL",
}


@dataclass(frozen=True)
class Settings:
    grid_size: Tuple[int, int] = DEFAULT_GRID
    map_path: Optional[Path] = None
    save_path: Path = DEFAULT_SAVE
    steps_per_sec: int = DEFAULT_SPEED
    log_level: int = logging.INFO


def parse_grid_size(text: str) -> Tuple[int, int]:
    parts = text.lower().replace(" ", "").split("x")
    if len(parts) != 2:
        raise ValueError(f"grid size must look like WxH, got {text!r}")
    try:
        w, h = int(parts[0]), int(parts[1])
    except ValueError:
        raise ValueError(f"grid size must look like WxH, got {text!r}") from None
    if w <= 0 or h <= 0:
        raise ValueError(f"grid size must be positive, got {text!r}")
    return (w, h)


def clamp_speed(v: int) -> int:
    return int(max(MIN_SPEED, min(MAX_SPEED, v)))


def parse_log_level(text: str) -> int:
    level = logging.getLevelName(text.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {text!r}")
    return level


def _raw_options(argv: Sequence[str], env: Mapping[str, str]) -> Dict[str, str]:
    raw: Dict[str, str] = {}
    for key, env_key in _ENV_KEYS.items():
        if env.get(env_key):
            raw[key] = env[env_key]
    for arg in argv:
        if not arg.startswith("--") or "=" not in arg:
            continue
        key, value = arg[2:].split("=", 1)
        if key in _ENV_KEYS:
            raw[key] = value
    return raw


def load_settings(argv: Optional[Sequence[str]] = None, env: Optional[Mapping[str, str]] = None) -> Settings:
    if argv is None:
        argv = sys.argv[1:]
    if env is None:
        env = os.environ
    raw = _raw_options(argv, env)

    grid_size = parse_grid_size(raw["grid"]) if "grid" in raw else DEFAULT_GRID
    map_path = Path(raw["map"]) if raw.get("map") else None
    save_path = Path(raw["save"]) if raw.get("save") else DEFAULT_SAVE
    if "speed" in raw:
        try:
            speed = clamp_speed(int(raw["speed"]))
        except ValueError:
            raise ValueError(f"speed must be an integer, got {raw['speed']!r}") from None
    else:
        speed = DEFAULT_SPEED
    log_level = parse_log_level(raw["log-level"]) if "log-level" in raw else logging.INFO

    return Settings(grid_size=grid_size, map_path=map_path, save_path=save_path,
                    steps_per_sec=speed, log_level=log_level)
