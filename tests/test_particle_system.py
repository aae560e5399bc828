import numpy as np
import pytest

import constants
from config import SimulationParameters
from particle_system import ParticleSystem

WHITE = constants.PALETTE["white"]


def make_system(n=100, bounds=(800, 600), colors=(WHITE,), seed=0):
    return ParticleSystem(n, bounds, colors, np.random.default_rng(seed))


def test_initialize_creates_exact_count_inside_bounds():
    system = make_system(n=5000, bounds=(800, 600))

    assert len(system) == 5000
    assert system.positions.shape == (5000, 2)
    assert (system.positions[:, 0] >= 0).all() and (system.positions[:, 0] < 800).all()
    assert (system.positions[:, 1] >= 0).all() and (system.positions[:, 1] < 600).all()
    assert not system.velocities.any()


def test_initialize_with_zero_particles():
    system = make_system(n=0)
    assert len(system) == 0
    system.update((10.0, 10.0), 0.1)


def test_single_color_is_shared():
    red = constants.PALETTE["red"]
    system = make_system(n=50, colors=(red,))
    assert all(system.particle(i).color == red for i in range(50))


def test_palette_colors_are_drawn_at_random():
    colors = (constants.PALETTE["red"], constants.PALETTE["green"], constants.PALETTE["blue"])
    system = make_system(n=3000, colors=colors)

    assert set(np.unique(system.color_indices)) == {0, 1, 2}
    assert {system.particle(i).color for i in range(3000)} == set(colors)


def test_from_parameters_uses_configured_values():
    params = SimulationParameters(window_width=100, window_height=50, particle_amount=7,
                                  acceleration_strength=10.0, max_speed=20.0)
    system = ParticleSystem.from_parameters(params, np.random.default_rng(1))

    assert len(system) == 7
    assert system.bounds.tolist() == [100.0, 50.0]
    assert system.acceleration_strength == 10.0
    assert system.max_speed == 20.0


def test_particle_view_writes_through_to_population():
    system = make_system(n=3)
    p = system.particle(1)
    p.position[0] = 42.0
    p.velocity[1] = -1.5
    assert system.positions[1, 0] == 42.0
    assert system.velocities[1, 1] == -1.5


def test_advance_and_draw_steps_then_draws_in_insertion_order():
    stepped = make_system(n=20, seed=3)
    reference = make_system(n=20, seed=3)
    calls = []

    stepped.advance_and_draw((400.0, 300.0), 0.05, lambda pos, color: calls.append((pos.copy(), color)))
    reference.update((400.0, 300.0), 0.05)

    assert len(calls) == 20
    for i, (pos, color) in enumerate(calls):
        np.testing.assert_allclose(pos, reference.positions[i], rtol=1e-12)
        assert color == WHITE
    np.testing.assert_allclose(stepped.velocities, reference.velocities, rtol=1e-12)


def test_update_moves_every_particle_toward_target():
    system = make_system(n=200)
    target = np.array([400.0, 300.0])
    before = np.linalg.norm(system.positions - target, axis=1)

    system.update(target, 0.1)

    after = np.linalg.norm(system.positions - target, axis=1)
    assert (after < before).all()


def test_draw_plots_visible_particles_as_single_pixels(blank_surface):
    surface = blank_surface((10, 10))
    surface.fill((0, 0, 0))
    system = make_system(n=4, bounds=(10, 10))
    system.positions[:] = [(2.7, 3.2), (-0.5, 4.0), (12.0, 1.0), (9.9, 9.9)]

    system.draw(surface)

    assert tuple(surface.get_at((2, 3)))[:3] == (255, 255, 255)
    assert tuple(surface.get_at((9, 9)))[:3] == (255, 255, 255)
    assert tuple(surface.get_at((0, 4)))[:3] == (0, 0, 0)
    lit = sum(1 for x in range(10) for y in range(10) if tuple(surface.get_at((x, y)))[:3] != (0, 0, 0))
    assert lit == 2


def test_draw_skips_transparent_colors(blank_surface):
    surface = blank_surface((4, 4))
    surface.fill((0, 0, 0))
    system = make_system(n=1, bounds=(4, 4), colors=(constants.PALETTE["blank"],))
    system.positions[:] = [(1.0, 1.0)]

    system.draw(surface)

    assert tuple(surface.get_at((1, 1)))[:3] == (0, 0, 0)


def test_negative_count_is_rejected():
    with pytest.raises(ValueError):
        make_system(n=-1)


def test_seed_makes_initialization_reproducible():
    colors = (constants.PALETTE["red"], constants.PALETTE["blue"])
    first = ParticleSystem(500, (800, 600), colors, seed=42)
    second = ParticleSystem(500, (800, 600), colors, seed=42)
    other = ParticleSystem(500, (800, 600), colors, seed=43)

    np.testing.assert_array_equal(first.positions, second.positions)
    np.testing.assert_array_equal(first.color_indices, second.color_indices)
    assert not np.array_equal(first.positions, other.positions)


def test_explicit_rng_takes_precedence_over_seed():
    from_rng = ParticleSystem(10, (100, 100), (WHITE,), rng=np.random.default_rng(5), seed=99)
    from_seed = ParticleSystem(10, (100, 100), (WHITE,), seed=5)
    np.testing.assert_array_equal(from_rng.positions, from_seed.positions)


def test_initialize_reseeds_an_existing_population():
    system = make_system(n=20, seed=1)
    system.initialize(30, 50, 40, (WHITE,), seed=7)
    reference = ParticleSystem(30, (50, 40), (WHITE,), seed=7)

    assert len(system) == 30
    np.testing.assert_array_equal(system.positions, reference.positions)
