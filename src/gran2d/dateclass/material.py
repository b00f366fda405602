"""
Material data structure for 2D granular simulations.

Holds the contact-law constants shared by particle–particle and
particle–wall contacts.
"""

import taichi as ti


@ti.dataclass
class Material:
    """Contact properties for grains and walls."""
    stiffness: ti.f64               # Young's-modulus-like Hertz stiffness
    coefficientFriction: ti.f64     # Coulomb friction coefficient

    # Viscous damping
    damping_normal: ti.f64          # Multiplies the normal closing speed inside the Hertz term
    damping_tangential: ti.f64      # Tangential force per unit sliding speed
