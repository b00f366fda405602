"""
Core configuration and data types for 2D granular simulations.
"""

# Base classes
from .contact_model import ContactModelConfig, HertzContactConfig
from .integrator import (IntegratorConfig, ReferenceGearConfig, StandardGearConfig,
                         PredictorCoefficients, CorrectorCoefficients)
from .types import WallGeometry, FLOOR
from .demconfig import GranSolverConfig

__all__ = [
    "ContactModelConfig",
    "HertzContactConfig",
    "IntegratorConfig",
    "ReferenceGearConfig",
    "StandardGearConfig",
    "PredictorCoefficients",
    "CorrectorCoefficients",
    "WallGeometry",
    "FLOOR",
    "GranSolverConfig",
]
