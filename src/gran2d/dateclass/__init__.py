"""
Core data structures for 2D granular simulations.

- Particles (Grain): mass, radius, position, velocity and the Gear derivatives.
- Walls: straight boundaries defined by normal and distance.
- Materials: contact stiffness, friction and damping.
"""

from .wall import Wall
from .grain import Grain
from .material import Material

__all__ = [
    "Material",
    "Wall",
    "Grain",
]
