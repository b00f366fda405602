"""
Pre- and post-processing: trajectory files and initial packings.

Plotting lives in gran2d.process.visual and is imported on demand.
"""

from .p4p import P4PFrame, write_frame, read_frames
from .generate import lattice_packing, disc_mass, write_p4p, min_surface_gap

__all__ = [
    "P4PFrame",
    "write_frame",
    "read_frames",
    "lattice_packing",
    "disc_mass",
    "write_p4p",
    "min_surface_gap",
]
