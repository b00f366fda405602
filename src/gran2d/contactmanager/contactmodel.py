"""
Contact force models for particle–particle and particle–wall interactions.

A model receives the normal overlap and the relative velocity expressed in the
local contact frame (normal n, tangent t = n rotated by +90 degrees) and
returns the contact force in the same frame. The solver maps it back to
global coordinates and applies the reaction.
"""

import taichi as ti


@ti.data_oriented
class ContactModel:
    """Interface shared by the 2D contact laws; constants live in mf[0]."""

    def __init__(self, material_field):
        self.mf = material_field

    @ti.func
    def particle_particle_force(self, i, j, gf, delta_n, v_c):
        """
        Force on grain i from grain j as (normal, tangential) components.

        delta_n is the overlap r_i + r_j - |x_i - x_j| and v_c holds the
        normal closing speed and the sliding speed along t.
        """
        pass

    @ti.func
    def particle_wall_force(self, i, gf, delta_n, v_c):
        """
        Force on grain i from a fixed wall, same frame and conventions as
        particle_particle_force with the wall normal as n.
        """
        pass
