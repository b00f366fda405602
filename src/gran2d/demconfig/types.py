"""
Boundary definitions.
"""

import math
from dataclasses import dataclass
from typing import Tuple


@dataclass
class WallGeometry:
    """Infinite straight wall n·x = d, normal pointing into the domain."""
    normal: Tuple[float, float]
    distance: float = 0.0

    def __post_init__(self):
        nx, ny = float(self.normal[0]), float(self.normal[1])
        length = math.hypot(nx, ny)
        if length == 0.0 or not math.isfinite(length):
            raise ValueError(f"Wall normal must be a finite non-zero vector, got {self.normal}")
        self.normal = (nx / length, ny / length)
        self.distance = float(self.distance)
        if not math.isfinite(self.distance):
            raise ValueError(f"Wall distance must be finite, got {self.distance}")


# The line y = 0
FLOOR = WallGeometry(normal=(0.0, 1.0), distance=0.0)
