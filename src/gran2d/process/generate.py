'''
Initial particle configurations: jittered lattice of non-overlapping discs
resting above the floor, written as a .p4p frame.

Each disc owns one square lattice cell of side 2 * r_max + min_gap and is
shifted inside it by at most the slack of that cell, so any two discs keep a
surface gap of at least min_gap and no disc touches the floor.
'''
import math
from typing import Optional, Tuple

import numpy as np

from .p4p import write_frame


def lattice_packing(n_particles: int,
                    width: float,
                    r_min: float,
                    r_max: Optional[float] = None,
                    min_gap: float = 0.0,
                    jitter: float = 0.5,
                    x0: float = 0.0,
                    y0: float = 0.0,
                    seed: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Place <n_particles> discs row by row in the strip [x0, x0 + width],
    starting at height y0.

    Returns
    -------
    positions : np.ndarray
        Array of shape (n_particles, 2).
    radii : np.ndarray
        Array of shape (n_particles,), uniform in [r_min, r_max].
    """
    if r_max is None:
        r_max = r_min
    if n_particles <= 0:
        raise ValueError(f"n_particles must be positive, got {n_particles}")
    if not (0 < r_min <= r_max):
        raise ValueError(f"Radii must satisfy 0 < r_min <= r_max, got {r_min}, {r_max}")
    if min_gap < 0 or not (0 <= jitter <= 1):
        raise ValueError("min_gap must be non-negative and jitter within [0, 1]")

    cell_size = 2.0 * r_max + min_gap
    nx = int(width // cell_size)
    if nx < 1:
        raise ValueError(f"Strip width {width} cannot hold a single cell of size {cell_size}")

    rng = np.random.default_rng(seed)
    radii = rng.uniform(r_min, r_max, size=n_particles) if r_max > r_min \
        else np.full(n_particles, float(r_min))

    idx = np.arange(n_particles)
    col = idx % nx
    row = idx // nx
    centres = np.column_stack([
        x0 + (col + 0.5) * cell_size,
        y0 + (row + 0.5) * cell_size
    ])

    # Room left in the cell on each side once the gap is reserved
    slack = (cell_size - 2.0 * radii - min_gap) / 2.0
    offsets = rng.uniform(-1.0, 1.0, size=(n_particles, 2)) * (jitter * slack)[:, None]

    return centres + offsets, radii


def disc_mass(radii, density: float) -> np.ndarray:
    """Mass per unit thickness of discs of the given areal density."""
    return density * math.pi * np.asarray(radii, dtype=np.float64) ** 2


def write_p4p(file_name: str, positions, radii, masses, velocities=None, t: float = 0.0):
    positions = np.asarray(positions, dtype=np.float64)
    n = positions.shape[0]
    if velocities is None:
        velocities = np.zeros((n, 2))
    with open(file_name, 'w', encoding='UTF-8') as f:
        write_frame(f, t, np.arange(1, n + 1), radii, masses, positions, velocities, precision=12)


def min_surface_gap(positions, radii) -> float:
    """Smallest surface-to-surface distance over all pairs (negative for overlaps)."""
    positions = np.asarray(positions, dtype=np.float64)
    radii = np.asarray(radii, dtype=np.float64)
    diff = positions[:, None, :] - positions[None, :, :]
    dist = np.sqrt(np.sum(diff * diff, axis=-1))
    gap = dist - (radii[:, None] + radii[None, :])
    iu = np.triu_indices(len(radii), k=1)
    if iu[0].size == 0:
        return math.inf
    return float(gap[iu].min())


if __name__ == "__main__":
    # Parameters
    n_particles = 200
    density = 2650
    width = 0.2
    r_min, r_max = 0.004, 0.006
    min_gap = 0.001
    output_file = "granular_column.p4p"

    positions, radii = lattice_packing(n_particles, width, r_min, r_max, min_gap=min_gap, seed=1)
    masses = disc_mass(radii, density)
    write_p4p(output_file, positions, radii, masses)

    print(f"Generated {n_particles} particles")
    print(f"Minimum gap: {min_surface_gap(positions, radii):.8f} (required {min_gap})")
    print(f"Lowest particle bottom: {np.min(positions[:, 1] - radii):.8f}")
    print(f"Output file: {output_file}")
