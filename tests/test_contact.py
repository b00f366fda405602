import math

import numpy as np
import pytest

from gran2d import GranSolver

from reference_model import forces as reference_forces

NO_GRAVITY = (0.0, 0.0)


def pair_force(make_solver, position, velocity, radii=(1.0, 1.0), **kwargs):
    kwargs.setdefault("gravity", NO_GRAVITY)
    solver = make_solver(position, list(radii), [1.0] * len(radii), **kwargs)
    solver.set_velocity(velocity)
    solver.compute_force()
    return solver.force


def test_separated_pair_feels_nothing(make_solver):
    f = pair_force(make_solver, [[0.0, 10.0], [2.5, 10.0]], [[1.0, 0.0], [-1.0, 0.0]],
                   damping_normal=0.1, damping_tangential=1.0)
    assert np.array_equal(f, np.zeros((2, 2)))


def test_touching_without_overlap_feels_nothing(make_solver):
    f = pair_force(make_solver, [[0.0, 10.0], [2.0, 10.0]], [[0.0, 0.0], [0.0, 0.0]])
    assert np.array_equal(f, np.zeros((2, 2)))


def test_newton_third_law_is_exact(make_solver):
    f = pair_force(make_solver,
                   [[0.13, 10.07], [1.41, 11.29]],
                   [[0.3, -0.7], [-1.1, 0.45]],
                   radii=(1.0, 0.9),
                   damping_normal=0.02, damping_tangential=3.0)
    assert np.any(f != 0.0)
    assert np.array_equal(f[0], -f[1])


def test_pair_force_matches_closed_form(make_solver):
    position = np.array([[0.13, 10.07], [1.41, 11.29]])
    velocity = np.array([[0.3, -0.7], [-1.1, 0.45]])
    radii = np.array([1.0, 0.9])
    f = pair_force(make_solver, position, velocity, radii=radii, stiffness=2e5, friction=0.3,
                   damping_normal=0.02, damping_tangential=3.0)
    expected = reference_forces(position, velocity, radii, np.ones(2), 2e5, 0.3, 0.02, 3.0,
                                gravity=NO_GRAVITY)
    assert np.allclose(f, expected, rtol=1e-12, atol=0.0)


@pytest.mark.parametrize("overlaps", [[1e-4, 1e-3, 1e-2, 0.05, 0.1]])
def test_normal_force_grows_with_overlap(make_solver, overlaps):
    magnitudes = []
    for delta in overlaps:
        f = pair_force(make_solver, [[0.0, 10.0], [2.0 - delta, 10.0]], [[0.0, 0.0], [0.0, 0.0]])
        # Repulsive: the left disc is pushed left
        assert f[0, 0] < 0.0
        magnitudes.append(-f[0, 0])
        assert -f[0, 0] == pytest.approx(math.sqrt(0.5) * 1e5 * delta ** 1.5, rel=1e-10)
    assert all(a < b for a, b in zip(magnitudes, magnitudes[1:]))


def test_normal_force_never_attracts(make_solver):
    # Fast separation makes the damped normal force negative before flooring
    f = pair_force(make_solver, [[0.0, 10.0], [1.99, 10.0]], [[-10.0, 0.3], [10.0, 0.0]],
                   damping_normal=0.05, damping_tangential=100.0)
    assert np.array_equal(f, np.zeros((2, 2)))


def test_no_tangential_force_without_sliding(make_solver):
    # Approaching along the line of centres only
    f = pair_force(make_solver, [[0.0, 10.0], [1.9, 10.0]], [[1.0, 0.0], [0.0, 0.0]],
                   damping_normal=0.01, damping_tangential=100.0)
    assert f[0, 0] < 0.0
    assert f[0, 1] == 0.0
    assert f[1, 1] == 0.0


@pytest.mark.parametrize("slide", [1e-4, 1e-3, 1e-2, 0.1, 1.0, 10.0])
def test_friction_is_viscous_and_capped(make_solver, slide):
    friction, gamma_t = 0.4, 50.0
    f = pair_force(make_solver, [[0.0, 10.0], [1.9, 10.0]], [[0.0, slide], [0.0, 0.0]],
                   friction=friction, damping_tangential=gamma_t)
    fn = -f[0, 0]
    assert fn == pytest.approx(math.sqrt(0.5) * 1e5 * 0.1 ** 1.5, rel=1e-10)
    # Opposes the left disc sliding upwards
    assert f[0, 1] < 0.0
    assert -f[0, 1] == pytest.approx(min(friction * fn, gamma_t * slide), rel=1e-10)


def test_floor_contact(make_solver):
    stiffness, friction, dn, dt_ = 1e5, 0.5, 0.05, 2.0
    position = np.array([[0.3, 0.99]])
    velocity = np.array([[0.2, -0.1]])
    solver = make_solver(position, [1.0], [2.0], stiffness=stiffness, friction=friction,
                         damping_normal=dn, damping_tangential=dt_)
    solver.set_velocity(velocity)
    solver.compute_force()

    fn = stiffness * math.sqrt(0.01) * (0.01 + dn * 0.1)
    ft = min(friction * fn, dt_ * 0.2)
    expected = np.array([[-ft, 2.0 * -9.8 + fn]])
    assert np.allclose(solver.force, expected, rtol=1e-12, atol=0.0)


def test_floor_ignores_particles_above_it(make_solver):
    solver = make_solver([[0.0, 1.0], [5.0, 3.0]], [1.0, 1.0], [1.5, 2.0])
    solver.compute_force()
    assert np.array_equal(solver.force, np.array([[0.0, 1.5 * -9.8], [0.0, 2.0 * -9.8]]))


def test_side_wall(make_config):
    config = make_config(gravity=NO_GRAVITY).add_wall(normal=(1.0, 0.0), distance=0.0)
    solver = GranSolver(config)
    solver.init_particles([[0.95, 5.0]], [1.0], [1.0])
    solver.compute_force()
    f = solver.force
    assert f[0, 0] == pytest.approx(1e5 * 0.05 ** 1.5, rel=1e-10)
    assert f[0, 1] == 0.0


def test_coincident_centres_are_skipped(make_solver, capsys):
    f = pair_force(make_solver, [[1.0, 10.0], [1.0, 10.0], [5.0, 10.0]],
                   [[0.0, 0.0]] * 3, radii=(1.0, 1.0, 1.0))
    assert np.array_equal(f, np.zeros((3, 2)))
    assert "coincident" in capsys.readouterr().out


def test_coincident_pair_count(make_solver):
    solver = make_solver([[1.0, 10.0], [1.0, 10.0]], [1.0, 1.0], [1.0, 1.0], gravity=NO_GRAVITY)
    solver.compute_force()
    assert solver.degenerate_pairs == 1
    assert np.all(np.isfinite(solver.force))


def test_cluster_matches_reference(make_solver, overlapping_cluster):
    position, radii, mass, velocity = overlapping_cluster
    contact = (1e5, 0.5, 0.01, 2.0)
    solver = make_solver(position, radii, mass, *contact)
    solver.set_velocity(velocity)
    solver.compute_force()
    expected = reference_forces(position, velocity, radii, mass, *contact)
    assert np.allclose(solver.force, expected, rtol=1e-10, atol=1e-9)


def test_parallel_pair_loop_agrees(make_solver, overlapping_cluster):
    position, radii, mass, velocity = overlapping_cluster
    contact = (1e5, 0.5, 0.01, 2.0)
    serial = make_solver(position, radii, mass, *contact)
    parallel = make_solver(position, radii, mass, *contact, deterministic=False)
    for solver in (serial, parallel):
        solver.set_velocity(velocity)
        solver.compute_force()
    assert np.allclose(serial.force, parallel.force, rtol=1e-10, atol=1e-9)
