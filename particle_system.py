# particle_system.py

import logging

import numpy as np
import pygame

import constants
import kinematics
from particle import Particle

logger = logging.getLogger("particle_sim")


class ParticleSystem:
    """
    Manages the state of all particles in the simulation using vectorized
    NumPy arrays (Structure of Arrays) and the JIT-compiled kinematics kernels.

    Data Contract:
    - Inputs:
        - num_particles (int): The number of particles to simulate.
        - bounds (tuple): The (width, height) of the viewport.
        - colors (sequence): One or more RGBA colors. With more than one, each
          particle draws its color uniformly at random (with replacement).
        - rng (np.random.Generator | None): The shared random number generator.
          When omitted, one is created from `seed`.
        - seed (int | None): Seed for a new generator when no rng is given.
          Runs are unseeded by default; tests pass a seed for reproducibility.
        - acceleration_strength (float), max_speed (float): Kinematics settings.
    - Outputs: None. This class modifies its internal state.
    - Side Effects: Manages the lifecycle of all particle data.
    - Invariants: The number of particles is constant throughout the simulation.
      positions, velocities and color_indices always have num_particles rows.
      Every velocity magnitude is <= max_speed after each update.
    """
    def __init__(self, num_particles: int, bounds: tuple, colors, rng: np.random.Generator = None,
                 acceleration_strength: float = constants.ACCELERATION_STRENGTH,
                 max_speed: float = constants.MAX_SPEED, seed: int = None):
        self.acceleration_strength = float(acceleration_strength)
        self.max_speed = float(max_speed)
        self.initialize(num_particles, bounds[0], bounds[1], colors, rng, seed)

    @classmethod
    def from_parameters(cls, params, rng: np.random.Generator):
        """Builds a population sized and colored from SimulationParameters."""
        return cls(
            num_particles=params.particle_amount,
            bounds=params.size,
            colors=params.particle_colors,
            rng=rng,
            acceleration_strength=params.acceleration_strength,
            max_speed=params.max_speed,
        )

    def initialize(self, count: int, width: float, height: float, color_source,
                   rng: np.random.Generator = None, seed: int = None):
        """
        (Re)creates `count` particles with uniform random positions in
        [0, width) x [0, height), zero velocity, and a color from color_source.
        """
        if rng is None:
            rng = np.random.default_rng(seed)
        if count < 0:
            raise ValueError(f"Particle count must be non-negative, got {count}")

        self.num_particles = count
        self.bounds = np.array((width, height), dtype=float)

        # --- Initialize properties using NumPy arrays (Structure of Arrays) ---
        positions = rng.random((count, 2)) * self.bounds
        # Float rounding of random() * bound can land exactly on the bound.
        self.positions = np.minimum(positions, np.nextafter(self.bounds, 0.0))
        self.velocities = np.zeros((count, 2), dtype=float)

        self.palette = np.array([tuple(c) for c in color_source], dtype=np.uint8).reshape(-1, 4)
        if len(self.palette) == 0:
            raise ValueError("At least one particle color is required")
        if len(self.palette) == 1:
            self.color_indices = np.zeros(count, dtype=np.intp)
        else:
            self.color_indices = rng.integers(0, len(self.palette), size=count)

        logger.info(
            f"ParticleSystem created for {count} particles in a {width}x{height} viewport "
            f"with {len(self.palette)} color(s)."
        )

    def __len__(self):
        return self.num_particles

    def particle(self, index: int) -> Particle:
        """Returns a Particle whose position/velocity are views into the population arrays."""
        return Particle(
            self.positions[index],
            self.velocities[index],
            self.palette[self.color_indices[index]],
        )

    def update(self, target_position, elapsed_seconds: float):
        """Steps every particle toward target_position (parallel kernel)."""
        kinematics.step_all(
            self.positions, self.velocities, target_position, elapsed_seconds,
            self.acceleration_strength, self.max_speed
        )

    def advance_and_draw(self, target_position, elapsed_seconds: float, draw_fn):
        """
        For every particle, in insertion order, applies one kinematics step and
        then calls draw_fn(position, color) to plot a single point.
        """
        for i in range(self.num_particles):
            p = self.particle(i)
            kinematics.step(p, target_position, elapsed_seconds, self.acceleration_strength, self.max_speed)
            draw_fn(p.position, p.color)

    def draw(self, surface: pygame.Surface):
        """
        Plots every particle as a single pixel. Particles outside the surface
        (which is normal while they swing past the target) are skipped, as are
        fully transparent colors.
        """
        width, height = surface.get_size()
        xs = self.positions[:, 0].astype(np.int64)
        ys = self.positions[:, 1].astype(np.int64)
        colors = self.palette[self.color_indices]

        # Truncate toward zero like a pixel cast, then keep on-surface, visible points.
        visible = (
            (self.positions[:, 0] >= 0) & (xs < width) &
            (self.positions[:, 1] >= 0) & (ys < height) &
            (colors[:, 3] > 0)
        )
        if not visible.any():
            return

        pixels = pygame.surfarray.pixels3d(surface)
        try:
            pixels[xs[visible], ys[visible]] = colors[visible, :3]
        finally:
            # Release the surface lock before the caller blits or flips.
            del pixels
