import math
from typing import Optional, Tuple

from .types import WallGeometry, FLOOR
from .contact_model import ContactModelConfig, HertzContactConfig
from .integrator import IntegratorConfig, ReferenceGearConfig, StandardGearConfig


class GranSolverConfig:
    """Configuration for the 2D granular solver."""

    def __init__(self,
                 dt: float,
                 contact_model: ContactModelConfig,
                 gravity: Tuple[float, float] = (0.0, -9.8),
                 integrator: Optional[IntegratorConfig] = None,
                 deterministic: bool = True,
                 verbose: bool = False):
        if not (dt > 0 and math.isfinite(dt)):
            raise ValueError(f"Time step dt must be positive, got {dt}")

        contact_model.validate()

        self.dt = float(dt)
        self.gravity = (float(gravity[0]), float(gravity[1]))
        self.contact_model = contact_model
        self.integrator = integrator if integrator is not None else ReferenceGearConfig()
        # Serialise the pair loop so forces accumulate in ascending (i, j) order
        self.deterministic = deterministic
        self.verbose = verbose

        self.walls = [FLOOR]

    def add_wall(self, normal: Tuple[float, float], distance: float = 0.0) -> 'GranSolverConfig':
        """
        Add an infinite straight wall n·x = distance. The normal points into
        the region the particles occupy and is normalised here.
        """
        self.walls.append(WallGeometry(normal=normal, distance=distance))
        return self

    def set_integrator(self, scheme: str) -> 'GranSolverConfig':
        if scheme.lower() == "reference":
            self.integrator = ReferenceGearConfig()
        elif scheme.lower() == "standard":
            self.integrator = StandardGearConfig()
        else:
            raise ValueError(
                f"Unknown integrator scheme: '{scheme}'. "
                f"Valid options are 'reference' or 'standard'."
            )
        return self

    def update_contact_model(self, **kwargs) -> 'GranSolverConfig':
        for key, value in kwargs.items():
            if hasattr(self.contact_model, key):
                setattr(self.contact_model, key, value)
            else:
                model_name = self.contact_model.get_model_name()
                raise ValueError(f"Unknown parameter '{key}' for {model_name} contact model")
        self.contact_model.validate()
        return self

    def summary(self) -> str:
        """Return a human-readable summary of the configuration."""
        model = self.contact_model
        model_name = model.get_model_name()

        summary = f"""
Granular Solver Configuration:
==============================
Time step: {self.dt} s
Gravity: ({self.gravity[0]}, {self.gravity[1]}) m/s²
Integrator: {self.integrator.get_scheme_name()}
Pair loop: {"serial" if self.deterministic else "parallel"}

Contact Model: {model_name.upper()}
"""
        if isinstance(model, HertzContactConfig):
            summary += f"""- Stiffness: {model.stiffness}
- Friction: {model.friction}
- Normal damping: {model.damping_normal}
- Tangential damping: {model.damping_tangential}
"""

        summary += "\nWalls:\n"
        for wall in self.walls:
            summary += f"- normal ({wall.normal[0]:.4f}, {wall.normal[1]:.4f}), distance {wall.distance}\n"

        return summary
