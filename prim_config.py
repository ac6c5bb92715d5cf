"""
Visualizer settings
Everything the interactive session used to keep as global state
"""

import json
from dataclasses import asdict, dataclass, fields


@dataclass
class VisualizerConfig:
    """Configuration parameters for :class:`PrimVisualizer`."""

    interval_ms: int = 800
    min_interval_ms: int = 100
    max_interval_ms: int = 2000
    history_limit: int = 14
    canvas_width: float = 900.0
    canvas_height: float = 600.0
    node_radius: float = 25.0
    max_label_length: int = 3
    min_random_weight: int = 1
    max_random_weight: int = 19
    random_jitter: float = 50.0
    default_edge_weight: int = 10

    def __post_init__(self):
        if not 0 < self.min_interval_ms <= self.max_interval_ms:
            raise ValueError("interval bounds must satisfy 0 < min <= max")
        self.check_interval(self.interval_ms)
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        if not 1 <= self.min_random_weight <= self.max_random_weight:
            raise ValueError("random weights must satisfy 1 <= min <= max")

    def check_interval(self, interval_ms):
        """Return interval_ms if it lies within the configured bounds"""
        if not self.min_interval_ms <= interval_ms <= self.max_interval_ms:
            raise ValueError(
                f"interval must be between {self.min_interval_ms} and "
                f"{self.max_interval_ms} ms, got {interval_ms}"
            )
        return interval_ms

    @property
    def bounds(self):
        """(width, height, radius) used to clamp dragged nodes"""
        return (self.canvas_width, self.canvas_height, self.node_radius)

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**data)


def load_config(path=None):
    """Read overrides from a JSON object file; defaults when path is None"""
    if path is None:
        return VisualizerConfig()
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError("config file must contain a JSON object")
    return VisualizerConfig.from_dict(data)
