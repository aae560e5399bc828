# particle.py

import numpy as np


class Particle:
    """
    Represents a single particle in the simulation.

    The population stores particles as parallel arrays; a Particle is a
    lightweight record whose `position` and `velocity` are 2-element views
    into those arrays, so stepping it updates the population in place.
    Standalone particles (e.g. in tests) own their own arrays.
    """
    __slots__ = ("position", "velocity", "color")

    def __init__(self, position, velocity=None, color=(255, 255, 255, 255)):
        self.position = position if isinstance(position, np.ndarray) else np.array(position, dtype=float)
        if velocity is None:
            velocity = np.zeros(2, dtype=float)
        self.velocity = velocity if isinstance(velocity, np.ndarray) else np.array(velocity, dtype=float)
        self.color = tuple(int(c) for c in color)

    def __repr__(self):
        return f"Particle(position={self.position.tolist()}, velocity={self.velocity.tolist()}, color={self.color})"
