import numpy as np
import taichi as ti
#=====================================
# Type Definition
#=====================================
Vector2 = ti.types.vector(2, ti.f64)


def as_particle_array(name: str, value, shape) -> np.ndarray:
    '''
    Copy <value> into a contiguous float64 array of the given shape,
    raising ValueError when the shape does not match.
    '''
    arr = np.ascontiguousarray(value, dtype=np.float64)
    if arr.shape != shape:
        raise ValueError(f"{name} must have shape {shape}, got {arr.shape}")
    return arr


def require_positive(name: str, arr: np.ndarray):
    bad = np.flatnonzero(~(arr > 0.0) | ~np.isfinite(arr))
    if bad.size > 0:
        raise ValueError(f"{name} must be strictly positive and finite, "
                         f"offending particle index {bad[0]} has value {arr[bad[0]]}")
