import sys

# Taichi packages (set backend, default precision and device memory)
import taichi as ti
ti.init(arch=ti.cpu, default_fp=ti.f64)

# Source packages
import numpy as np
from gran2d import GranSolver, StandardGearConfig

# =====================================
# Simulation Constants
# =====================================
radius = 1.0
mass = 1.0
approach_speed = 1.0  # Speed of each disc towards the other
dt = 1e-4
nsteps = 3000


def main(damping_normal: float):
    """Two discs collide head on away from the floor; report the restitution."""
    position = np.array([[-1.05, 10.0], [1.05, 10.0]])
    solver = GranSolver.create(
        position, [radius, radius], [mass, mass],
        young_mod=1e5, friction=0.5, damp_normal=damping_normal, damp_tangent=0.0,
        dt=dt, gravity=(0.0, 0.0), integrator=StandardGearConfig()
    )
    solver.set_velocity([[approach_speed, 0.0], [-approach_speed, 0.0]])

    solver.run(nsteps)

    v = solver.velocity
    relative_before = 2.0 * approach_speed
    relative_after = v[1, 0] - v[0, 0]
    print(f"t = {solver.time:.4f} s, separation {solver.position[1, 0] - solver.position[0, 0]:.4f}")
    print(f"Relative speed before {relative_before:.4f}, after {relative_after:.4f}")
    print(f"Apparent restitution {relative_after / relative_before:.4f}")


if __name__ == '__main__':
    main(float(sys.argv[1]) if len(sys.argv) > 1 else 0.005)
