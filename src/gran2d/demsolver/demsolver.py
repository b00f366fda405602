import taichi as ti
import taichi.math as tm
import os
import numpy as np
import time

from .utils import *
from ..demconfig import GranSolverConfig, HertzContactConfig
from ..dateclass import Grain, Material, Wall
from ..contactmanager import ContactModel, DampedHertzContactModel
from ..process.p4p import write_frame, read_frames


@ti.data_oriented
class GranSolver:
    def __init__(self, config: GranSolverConfig):
        self.config = config
        # Particle fields
        self.gf: ti.StructField
        self.wf: ti.StructField
        # Material mapping: a single material shared by grains and walls
        self.mf: ti.StructField
        # Coincident-centre pairs met by the last force evaluation
        self.degenerate: ti.Field

        self.contact_model: ContactModel = None
        self.initialized = False

        # Simulation time, advanced once per corrected step
        self.time = 0.0
        self.degenerate_pairs = 0

        if not isinstance(config.contact_model, HertzContactConfig):
            raise ValueError(
                f"Unknown contact model type: {type(config.contact_model).__name__}. "
                f"Expected HertzContactConfig."
            )
        self.predictor = config.integrator.predictor_coefficients(config.dt)
        self.corrector = config.integrator.corrector_coefficients(config.dt)

    @staticmethod
    def create(position, radii, mass, young_mod: float, friction: float,
               damp_normal: float, damp_tangent: float, dt: float, **kwargs):
        """
        Factory method mirroring the bare construction interface: initial
        positions (N, 2), radii (N), masses (N), the four contact constants
        and the time step. Extra keyword arguments go to GranSolverConfig.
        """
        contact_model = HertzContactConfig(
            stiffness=young_mod,
            friction=friction,
            damping_normal=damp_normal,
            damping_tangential=damp_tangent
        )
        config = GranSolverConfig(dt=dt, contact_model=contact_model, **kwargs)
        solver = GranSolver(config)
        solver.init_particles(position, radii, mass)
        return solver

    def save(self, time: float, out_dir: str = "output"):
        '''
        save the solved data at <time> to file .p4p
        '''
        os.makedirs(out_dir, exist_ok=True)
        idx = int(round(time / self.config.dt))

        file_name = os.path.join(out_dir, f"output_T{idx:06d}")

        with open(file_name + ".p4p", "w", encoding="UTF-8") as p4p:
            self.save_single(p4p, time)
        return file_name + ".p4p"

    def save_single(self, p4pfile, t: float):
        '''
        save the solved data at <time> to <p4pfile>
        usage:
            p4p = open('output.p4p',encoding="UTF-8",mode='w')
            while(True):
                solver.save_single(p4p, solver.time)
        '''
        tk1 = time.time()

        write_frame(p4pfile, t,
                    self.gf.ID.to_numpy(),
                    self.gf.radius.to_numpy(),
                    self.gf.mass.to_numpy(),
                    self.gf.position.to_numpy(),
                    self.gf.velocity.to_numpy())

        tk2 = time.time()
        if self.config.verbose:
            print(f"save time cost = {tk2 - tk1:.3f}s")

    def init_particle_fields(self, file_name: str):
        '''
        Build the particles from the first frame of a .p4p file.
        '''
        frames = read_frames(file_name)
        if not frames:
            raise ValueError(f"No TIMESTEP PARTICLES block found in {file_name}")
        frame = frames[0]
        self.init_particles(frame.position, frame.radius, frame.mass,
                            velocity=frame.velocity, ids=frame.ids)

    def init_particles(self, position, radii, mass, velocity=None, ids=None):
        '''
        Allocate the particle, wall and material fields. Velocity defaults to
        zero; force and the Gear derivatives rd2, rd3, rd4 start at zero.
        '''
        if self.initialized:
            raise RuntimeError("Particles are already initialized; build a new solver instead")

        np_radius = np.ascontiguousarray(radii, dtype=np.float64).reshape(-1)
        n = np_radius.shape[0]
        if n == 0:
            raise ValueError("At least one particle is required")
        np_position = as_particle_array("position", position, (n, 2))
        np_mass = as_particle_array("mass", mass, (n,))
        require_positive("radii", np_radius)
        require_positive("mass", np_mass)
        if velocity is None:
            np_velocity = np.zeros((n, 2))
        else:
            np_velocity = as_particle_array("velocity", velocity, (n, 2))
        if ids is None:
            np_ID = np.arange(1, n + 1, dtype=np.int32)
        else:
            np_ID = np.asarray(ids, dtype=np.int32).reshape(-1)
            if np_ID.shape != (n,):
                raise ValueError(f"ids must have shape {(n,)}, got {np_ID.shape}")

        nwall = len(self.config.walls)

        self.gf = Grain.field(shape=(n))
        self.wf = Wall.field(shape=nwall)
        self.mf = Material.field(shape=1)
        self.degenerate = ti.field(ti.i32, shape=())

        self.gf.ID.from_numpy(np_ID)
        self.gf.radius.from_numpy(np_radius)
        self.gf.mass.from_numpy(np_mass)
        self.gf.position.from_numpy(np_position)
        self.gf.velocity.from_numpy(np_velocity)
        self.gf.rd2.fill(0.0)
        self.gf.rd3.fill(0.0)
        self.gf.rd4.fill(0.0)
        self.gf.force.fill(0.0)

        self.wf.normal.from_numpy(np.array([w.normal for w in self.config.walls], dtype=np.float64))
        self.wf.distance.from_numpy(np.array([w.distance for w in self.config.walls], dtype=np.float64))

        # ========================================
        # Material Properties Assignment
        # ========================================
        contact_model = self.config.contact_model
        self.mf.stiffness[0] = contact_model.stiffness
        self.mf.coefficientFriction[0] = contact_model.friction
        self.mf.damping_normal[0] = contact_model.damping_normal
        self.mf.damping_tangential[0] = contact_model.damping_tangential

        self.set_contact_model()
        self.initialized = True
        self.time = 0.0

        if self.config.verbose:
            print(f"Initialized {n} particles with max radius {np_radius.max():.6f} m")
            print(f"Contact model: {type(self.contact_model).__name__}")

    def set_contact_model(self, model_type: str = "hertz"):
        """
        Set the contact model used for force calculations.

        Raises:
            ValueError: If model_type is not a known model
        """
        if model_type.lower() == "hertz":
            self.contact_model = DampedHertzContactModel(self.mf)
        else:
            raise ValueError(
                f"Unknown contact model type: '{model_type}'. "
                f"Valid options are 'hertz'."
            )

    # >>> state access
    ###------------------###
    def _require_particles(self):
        if not self.initialized:
            raise RuntimeError("Particles are not initialized; call init_particles first")

    @property
    def num_particles(self) -> int:
        self._require_particles()
        return self.gf.shape[0]

    @property
    def position(self) -> np.ndarray:
        self._require_particles()
        return self.gf.position.to_numpy()

    @property
    def velocity(self) -> np.ndarray:
        self._require_particles()
        return self.gf.velocity.to_numpy()

    @property
    def force(self) -> np.ndarray:
        self._require_particles()
        return self.gf.force.to_numpy()

    @property
    def rd2(self) -> np.ndarray:
        self._require_particles()
        return self.gf.rd2.to_numpy()

    @property
    def rd3(self) -> np.ndarray:
        self._require_particles()
        return self.gf.rd3.to_numpy()

    @property
    def rd4(self) -> np.ndarray:
        self._require_particles()
        return self.gf.rd4.to_numpy()

    @property
    def radii(self) -> np.ndarray:
        self._require_particles()
        return self.gf.radius.to_numpy()

    @property
    def mass(self) -> np.ndarray:
        self._require_particles()
        return self.gf.mass.to_numpy()

    def set_position(self, position):
        self._require_particles()
        self.gf.position.from_numpy(as_particle_array("position", position, (self.gf.shape[0], 2)))

    def set_velocity(self, velocity):
        self._require_particles()
        self.gf.velocity.from_numpy(as_particle_array("velocity", velocity, (self.gf.shape[0], 2)))

    @ti.kernel
    def kinetic_energy(self) -> ti.f64:
        gf = ti.static(self.gf)
        energy = ti.f64(0.0)
        for i in gf:
            energy += 0.5 * gf[i].mass * tm.dot(gf[i].velocity, gf[i].velocity)
        return energy
    # <<< state access
    ###------------------###

    # >>> Gear predictor
    ###------------------###
    def predict(self):
        '''
        Taylor-extrapolate position, velocity and the derivatives by one step
        '''
        p = self.predictor
        self._predict(p.a1, p.a2, p.a3, p.a4, p.vel_rd4)

    @ti.kernel
    def _predict(self, a1: ti.f64, a2: ti.f64, a3: ti.f64, a4: ti.f64, vel_rd4: ti.f64):
        gf = ti.static(self.gf)
        for i in gf:
            gf[i].position += a1 * gf[i].velocity + a2 * gf[i].rd2 + a3 * gf[i].rd3 + a4 * gf[i].rd4
            gf[i].velocity += a1 * gf[i].rd2 + a2 * gf[i].rd3 + vel_rd4 * gf[i].rd4
            gf[i].rd2 += a1 * gf[i].rd3 + a2 * gf[i].rd4
            gf[i].rd3 += a1 * gf[i].rd4
    # <<< Gear predictor
    ###------------------###

    # >>> force model
    ###------------------###
    @ti.kernel
    def clear_state(self):
        # alias
        gf = ti.static(self.gf)

        for i in gf:
            gf[i].force = Vector2(0.0, 0.0)
        self.degenerate[None] = 0

    @ti.func
    def resolve(self, i: ti.i32, j: ti.i32):
        '''
        Particle-particle contact evaluation
        '''
        # alias
        gf = ti.static(self.gf)

        dr = gf[i].position - gf[j].position
        rsum = gf[i].radius + gf[j].radius
        if tm.dot(dr, dr) < rsum * rsum:
            length = tm.length(dr)
            if length > 0.0:
                n = dr / length
                t = Vector2(-n[1], n[0])
                dv = gf[i].velocity - gf[j].velocity
                delta_n = rsum - length

                # LOCAL frame: normal closing speed, tangential speed
                v_c = Vector2(-tm.dot(n, dv), tm.dot(t, dv))
                F = self.contact_model.particle_particle_force(i, j, gf, delta_n, v_c)

                # LOCAL to GLOBAL, equal and opposite on the partner
                F_global = F[0] * n + F[1] * t
                ti.atomic_add(gf[i].force, F_global)
                ti.atomic_add(gf[j].force, -F_global)
            else:
                # No normal direction for coincident centres
                ti.atomic_add(self.degenerate[None], 1)

    @ti.kernel
    def resolve_pairs_serial(self):
        n = self.gf.shape[0]
        ti.loop_config(serialize=True)
        for i in range(n):
            for j in range(i + 1, n):
                self.resolve(i, j)

    @ti.kernel
    def resolve_pairs_parallel(self):
        n = self.gf.shape[0]
        for i in range(n):
            for j in range(i + 1, n):
                self.resolve(i, j)

    @ti.kernel
    def apply_body_force(self, gx: ti.f64, gy: ti.f64):
        # alias
        # Gravity
        gf = ti.static(self.gf)
        g = Vector2(gx, gy)
        for i in gf:
            gf[i].force += gf[i].mass * g

    @ti.func
    def evaluate_wall(self, i: ti.i32, j: ti.i32):  # i is particle, j is wall
        '''
        Particle-wall contact evaluation, the wall does not move
        '''
        # alias
        gf = ti.static(self.gf)
        wf = ti.static(self.wf)

        n = wf[j].normal
        delta_n = gf[i].radius - (tm.dot(gf[i].position, n) - wf[j].distance)
        if delta_n > 0.0:
            t = Vector2(-n[1], n[0])
            dv = gf[i].velocity
            v_c = Vector2(-tm.dot(n, dv), tm.dot(t, dv))
            F = self.contact_model.particle_wall_force(i, gf, delta_n, v_c)
            gf[i].force += F[0] * n + F[1] * t

    @ti.kernel
    def resolve_wall(self):
        '''
        Particle-wall contact detection
        '''
        # alias
        gf = ti.static(self.gf)
        wf = ti.static(self.wf)
        # Walls of one particle are visited in order by the same thread
        for i in gf:
            for j in range(wf.shape[0]):
                self.evaluate_wall(i, j)

    def compute_force(self):
        '''
        Rebuild the force on every particle from the predicted state:
        pair contacts, then gravity, then walls.
        '''
        self.clear_state()
        if self.config.deterministic:
            self.resolve_pairs_serial()
        else:
            self.resolve_pairs_parallel()
        self.apply_body_force(self.config.gravity[0], self.config.gravity[1])
        self.resolve_wall()

        self.degenerate_pairs = self.degenerate[None]
        if self.degenerate_pairs > 0:
            print(f"WARNING: {self.degenerate_pairs} particle pair(s) with coincident centres skipped")
    # <<< force model
    ###------------------###

    # >>> Gear corrector
    ###------------------###
    def correct(self):
        '''
        Feed the acceleration residual back into the state and advance time
        '''
        c = self.corrector
        self._correct(c.c0, c.c1, c.c2, c.c3, c.c4)
        self.time += self.config.dt

    @ti.kernel
    def _correct(self, c0: ti.f64, c1: ti.f64, c2: ti.f64, c3: ti.f64, c4: ti.f64):
        gf = ti.static(self.gf)
        for i in gf:
            accel = gf[i].force / gf[i].mass
            corr = accel - gf[i].rd2
            gf[i].position += c0 * corr
            gf[i].velocity += c1 * corr
            gf[i].rd2 = accel + c2 * corr
            if c3 != 0.0:
                gf[i].rd3 += c3 * corr
            gf[i].rd4 += c4 * corr
    # <<< Gear corrector
    ###------------------###

    def step(self):
        '''
        Run one step of the simulation
        '''
        self._require_particles()
        self.predict()
        self.compute_force()
        self.correct()

    def run(self, nsteps: int):
        for _ in range(nsteps):
            self.step()
