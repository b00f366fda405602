"""
Gear predictor-corrector solver for 2D granular dynamics.
"""

# Base classes
from .demsolver import GranSolver

__all__ = [
    "GranSolver",

]
