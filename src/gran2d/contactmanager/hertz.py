"""
Damped Hertzian contact force model for 2D granular simulations.

Normal force grows with overlap to the power 1.5 and carries a damping term
proportional to the normal closing speed; it is floored at zero so contacts
never attract. Tangential force is viscous in the sliding speed and capped by
Coulomb friction. Walls use the same law with the effective radius equal to
the particle radius.
"""

import taichi as ti
from .contactmodel import ContactModel

#=====================================
# Type Definition
#=====================================

Vector2 = ti.types.vector(2, ti.f64)


@ti.func
def sgn(x):
    # Three-way comparison, zero maps to zero
    ret = 0.0
    if x > 0.0:
        ret = 1.0
    elif x < 0.0:
        ret = -1.0
    return ret


@ti.data_oriented
class DampedHertzContactModel(ContactModel):
    """
        Damped Hertz contact model with rate-dependent, Coulomb-capped friction.

        Fn = max(0, sqrt(R*) * E * sqrt(delta) * (delta + gamma_n * v_n))
        Ft = min(mu * Fn, gamma_t * |v_t|)
        F  = Fn * n - sgn(v_t) * Ft * t

        v_n is the normal closing speed and v_t the relative speed along t.
    """

    def __init__(self, material_field):
        """
        Initialize the damped Hertz contact model.

        Args:
            material_field (MaterialField): Field containing the contact constants (index 0)
        """
        super().__init__(material_field)

    @ti.func
    def hertz_force(self, R_star, delta_n, v_c: Vector2) -> Vector2:
        mf = ti.static(self.mf)
        Fn = ti.max(0.0, ti.sqrt(R_star) * mf[0].stiffness * ti.sqrt(delta_n)
                    * (delta_n + mf[0].damping_normal * v_c[0]))
        Ft = ti.min(mf[0].coefficientFriction * Fn, mf[0].damping_tangential * ti.abs(v_c[1]))
        return Vector2(Fn, -sgn(v_c[1]) * Ft)

    @ti.func
    def particle_particle_force(self, i, j, gf, delta_n, v_c: Vector2) -> Vector2:
        R_star = gf[i].radius * gf[j].radius / (gf[i].radius + gf[j].radius)
        return self.hertz_force(R_star, delta_n, v_c)

    @ti.func
    def particle_wall_force(self, i, gf, delta_n, v_c: Vector2) -> Vector2:
        R_star = gf[i].radius
        return self.hertz_force(R_star, delta_n, v_c)
