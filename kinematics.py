# kinematics.py

import math

import numba
import numpy as np

import constants

# --- JIT-Compiled Physics Functions ---
# These functions are compiled to machine code by Numba. They operate only on
# NumPy arrays and plain scalars, as required by Numba's nopython mode.
# fastmath is left off: the speed clamp relies on strict IEEE rounding to hold
# |v| <= max_speed exactly.

# Multiplying by this shrinks a float by at least one ulp.
_SHRINK = 1.0 - 2.0 ** -52


@numba.jit(nopython=True)
def _speed_jit(vx, vy):
    return math.sqrt(vx * vx + vy * vy)


@numba.jit(nopython=True)
def _integrate_jit(px, py, vx, vy, tx, ty, dt, acceleration_strength, max_speed):
    """
    One explicit Euler step of a single particle toward (tx, ty).
    Returns the new (px, py, vx, vy).
    """
    dx = tx - px
    dy = ty - py
    distance = math.sqrt(dx * dx + dy * dy)
    if distance > 0.0:
        dir_x = dx / distance
        dir_y = dy / distance
    else:
        # Exactly at the target: no force.
        dir_x = 0.0
        dir_y = 0.0

    vx += dir_x * acceleration_strength * dt
    vy += dir_y * acceleration_strength * dt

    speed = _speed_jit(vx, vy)
    if speed > max_speed:
        scale = max_speed / speed
        vx *= scale
        vy *= scale
        # Rounding can leave the rescaled speed one ulp above the limit.
        while _speed_jit(vx, vy) > max_speed:
            vx *= _SHRINK
            vy *= _SHRINK

    px += vx * dt
    py += vy * dt
    return px, py, vx, vy


@numba.jit(nopython=True, parallel=True)
def _step_all_jit(positions, velocities, tx, ty, dt, acceleration_strength, max_speed):
    """
    Numba-accelerated update of every particle. Particles are independent, so
    the index range is split across worker threads with prange.
    """
    for i in numba.prange(positions.shape[0]):
        px, py, vx, vy = _integrate_jit(
            positions[i, 0], positions[i, 1],
            velocities[i, 0], velocities[i, 1],
            tx, ty, dt, acceleration_strength, max_speed
        )
        positions[i, 0] = px
        positions[i, 1] = py
        velocities[i, 0] = vx
        velocities[i, 1] = vy


def speed(velocity) -> float:
    """Magnitude of a 2D velocity, computed exactly as the clamp computes it."""
    return _speed_jit(float(velocity[0]), float(velocity[1]))


def step(particle, target_position, elapsed_seconds: float,
         acceleration_strength: float = constants.ACCELERATION_STRENGTH,
         max_speed: float = constants.MAX_SPEED):
    """
    Advances one particle by one time step, steering it toward a target.

    The particle's position and velocity arrays are mutated in place.
    Positions are never clamped to the viewport: particles may swing past the
    target and leave the screen under momentum.

    - Inputs:
        - particle: any object with 2-element `position` and `velocity` arrays.
        - target_position: (x, y) the particle accelerates toward.
        - elapsed_seconds (float): frame delta time, >= 0.
    """
    px, py, vx, vy = _integrate_jit(
        float(particle.position[0]), float(particle.position[1]),
        float(particle.velocity[0]), float(particle.velocity[1]),
        float(target_position[0]), float(target_position[1]),
        float(elapsed_seconds), float(acceleration_strength), float(max_speed)
    )
    particle.position[0] = px
    particle.position[1] = py
    particle.velocity[0] = vx
    particle.velocity[1] = vy


def step_all(positions: np.ndarray, velocities: np.ndarray, target_position, elapsed_seconds: float,
             acceleration_strength: float = constants.ACCELERATION_STRENGTH,
             max_speed: float = constants.MAX_SPEED):
    """Vectorized `step` over (N, 2) position and velocity arrays, in place."""
    _step_all_jit(
        positions, velocities,
        float(target_position[0]), float(target_position[1]),
        float(elapsed_seconds), float(acceleration_strength), float(max_speed)
    )
