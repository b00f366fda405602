"""
Grain (particle) data structure for 2D granular simulations.

Represents a disc advanced by a Gear predictor-corrector: besides position and
velocity each grain carries the three higher derivatives rd2, rd3, rd4 of its
position. Stored in double precision regardless of the Taichi default float.
"""

import taichi as ti

#=====================================
# Type Definitions
#=====================================

Vector2 = ti.types.vector(2, ti.f64)


@ti.dataclass
class Grain:
    """Represents a circular particle in the plane."""
    ID: ti.i32              # Particle identifier written to trajectory files

    mass: ti.f64            # Particle mass, constant after construction
    radius: ti.f64          # Particle radius, constant after construction

    # Gear state (global coordinates)
    position: Vector2       # Center position
    velocity: Vector2       # Linear velocity
    rd2: Vector2            # Second derivative (acceleration)
    rd3: Vector2            # Third derivative
    rd4: Vector2            # Fourth derivative

    force: Vector2          # Net force, rebuilt every step
