"""
Contact model registry for 2D granular simulations.

Provides a unified interface to contact force models, currently:
- Damped Hertzian normal force with Coulomb-capped viscous friction
"""

from .contactmodel import ContactModel
from .hertz import DampedHertzContactModel

__all__ = [
    "ContactModel",
    "DampedHertzContactModel",
]
