import os

os.environ.setdefault("MPLBACKEND", "Agg")

import numpy as np
import pytest
import taichi as ti

# Strict IEEE arithmetic so kernels can be compared with the Python model
ti.init(arch=ti.cpu, default_fp=ti.f64, fast_math=False)

from gran2d import GranSolver, GranSolverConfig, HertzContactConfig  # noqa: E402


@pytest.fixture
def make_solver():
    """Build a solver through the bare construction interface."""
    def _make(position, radii, mass, stiffness=1e5, friction=0.5, damping_normal=0.0,
              damping_tangential=0.0, dt=1e-4, **kwargs):
        return GranSolver.create(np.asarray(position, dtype=np.float64), radii, mass,
                                 stiffness, friction, damping_normal, damping_tangential,
                                 dt, **kwargs)
    return _make


@pytest.fixture
def make_config():
    def _make(dt=1e-4, stiffness=1e5, friction=0.5, damping_normal=0.0,
              damping_tangential=0.0, **kwargs):
        contact_model = HertzContactConfig(stiffness=stiffness, friction=friction,
                                           damping_normal=damping_normal,
                                           damping_tangential=damping_tangential)
        return GranSolverConfig(dt=dt, contact_model=contact_model, **kwargs)
    return _make


@pytest.fixture
def overlapping_cluster():
    """A small jammed block of discs, some touching the floor and each other."""
    rng = np.random.default_rng(42)
    nx, ny = 4, 3
    spacing = 1.9
    xs, ys = np.meshgrid(np.arange(nx) * spacing, 0.97 + np.arange(ny) * spacing)
    position = np.column_stack([xs.ravel(), ys.ravel()]) + rng.uniform(-0.02, 0.02, size=(nx * ny, 2))
    radii = rng.uniform(0.95, 1.05, size=nx * ny)
    mass = rng.uniform(0.8, 1.2, size=nx * ny)
    velocity = rng.uniform(-0.5, 0.5, size=(nx * ny, 2))
    return position, radii, mass, velocity
