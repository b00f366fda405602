"""
gran2d: Gear predictor-corrector integrator for 2D granular dynamics.

Discs interact through a damped Hertzian contact law with Coulomb-capped
viscous friction, fall under gravity and rest on the floor y = 0.

Call ti.init(...) (drivers use default_fp=ti.f64) before creating a solver.
"""

from .demconfig import (GranSolverConfig, HertzContactConfig, ReferenceGearConfig,
                        StandardGearConfig, WallGeometry)
from .demsolver import GranSolver

__all__ = [
    "GranSolverConfig",
    "HertzContactConfig",
    "ReferenceGearConfig",
    "StandardGearConfig",
    "WallGeometry",
    "GranSolver",
]
