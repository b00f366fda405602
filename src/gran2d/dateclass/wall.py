"""
Wall data structure for 2D granular simulations.

Represents an infinite straight boundary using the line equation:
n · x = d, where n is the unit normal vector and d is the distance from the origin.
"""

import taichi as ti

#=====================================
# Type Definitions
#=====================================

Vector2 = ti.types.vector(2, ti.f64)


@ti.dataclass
class Wall:
    """Represents an immovable infinite line in 2D space."""
    normal: Vector2      # Unit normal vector pointing *into* the valid simulation domain
    distance: ti.f64     # Signed distance from the origin to the wall (i.e., d in n·x = d)
