import time

# Taichi packages (set backend, default precision and device memory)
import taichi as ti
ti.init(arch=ti.cpu, default_fp=ti.f64)

# Source packages
import numpy as np
from gran2d import GranSolver, GranSolverConfig, HertzContactConfig, StandardGearConfig
from gran2d.process import lattice_packing, disc_mass, write_p4p

# =====================================
# Simulation Constants
# =====================================
# Packing
n_particles = 120
width = 0.3
r_min, r_max = 0.008, 0.012
min_gap = 0.002
density = 2650.0  # Areal density (kg/m²)

# Physical properties
dt = 1e-5  # Time step size (seconds)
target_time = 0.5  # Total simulation time (seconds)
saving_interval_time = 0.01  # Time interval between saved frames (seconds)

contact_model = HertzContactConfig(
    stiffness=5e8,
    friction=0.4,
    damping_normal=2e-3,
    damping_tangential=50.0
)

particle_init = "floor_settle.p4p"  # Initial particle information file


def main():
    """Settle a jittered column of discs onto the floor between two side walls."""
    positions, radii = lattice_packing(n_particles, width, r_min, r_max, min_gap=min_gap, seed=7)
    write_p4p(particle_init, positions, radii, disc_mass(radii, density))

    config = GranSolverConfig(
        dt=dt,
        contact_model=contact_model,
        integrator=StandardGearConfig(),
        verbose=True
    )
    config.add_wall(normal=(1.0, 0.0), distance=0.0)      # left wall x = 0
    config.add_wall(normal=(-1.0, 0.0), distance=-width)  # right wall x = width

    solver = GranSolver(config)
    solver.init_particle_fields(particle_init)

    print(config.summary())

    step = 0
    start_time = time.time()

    nsteps = int(target_time / dt)
    saving_interval_steps = int(saving_interval_time / dt)

    with open('output.p4p', encoding="UTF-8", mode='w') as p4p:
        solver.save_single(p4p, solver.time)
        # Main simulation loop
        while step < nsteps:
            for _ in range(saving_interval_steps):
                step += 1
                solver.step()

            # Print progress information
            progress_percentage = step / nsteps * 100
            energy = solver.kinetic_energy()
            print(f"Solved steps: {step} / {nsteps} ({progress_percentage:.2f}%), kinetic energy {energy:.6e} J")
            if not np.isfinite(energy):
                print("Kinetic energy is no longer finite, stopping")
                break

            # Save current state
            solver.save_single(p4p, solver.time)

    # Calculate and print execution time
    end_time = time.time()
    execution_time = end_time - start_time
    print(f"Total execution time: {execution_time:.2f} seconds")


if __name__ == '__main__':
    main()
