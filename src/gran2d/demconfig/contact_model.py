'''
Contact model parameter settings
'''
from dataclasses import dataclass
from abc import ABC, abstractmethod


class ContactModelConfig(ABC):
    """Base class for contact models."""

    @abstractmethod
    def get_model_name(self) -> str:
        pass

    @abstractmethod
    def validate(self):
        pass


@dataclass
class HertzContactConfig(ContactModelConfig):
    """Damped Hertzian normal force with capped viscous friction."""
    stiffness: float = 1e5            # Young's-modulus-like contact stiffness
    friction: float = 0.5             # Coulomb cap, Ft <= friction * Fn
    damping_normal: float = 0.0       # Multiplies the normal closing speed
    damping_tangential: float = 0.0   # Viscous friction per unit sliding speed

    def get_model_name(self) -> str:
        return "hertz"

    def validate(self):
        if not self.stiffness > 0:
            raise ValueError(f"Stiffness must be positive, got {self.stiffness}")
        if not self.friction >= 0:
            raise ValueError(f"Friction coefficient must be non-negative, got {self.friction}")
        if not (self.damping_normal >= 0 and self.damping_tangential >= 0):
            raise ValueError("Damping values must be non-negative")
