"""Configuration helpers for the grid engine and its session."""

from __future__ import annotations

import copy
from dataclasses import dataclass

from .types import Color


@dataclass
class EngineConfig:
    """Thresholds and display colors shared by the session components."""

    bounds_pick_radius: float = 10.0
    slice_pick_distance: float = 5.0
    paste_limit: float = 1.0
    w_epsilon: float = 1e-12
    collinear_epsilon: float = 1e-9
    selected_color: Color = (255, 255, 0)
    unselected_color: Color = (0, 0, 255)
    bounds_color: Color = (0, 255, 0)
    marker_color: Color = (255, 0, 0)


_ENGINE_CONFIG = EngineConfig()


def get_engine_config() -> EngineConfig:
    return copy.deepcopy(_ENGINE_CONFIG)


def set_engine_config(config: EngineConfig) -> None:
    global _ENGINE_CONFIG
    _ENGINE_CONFIG = copy.deepcopy(config)
