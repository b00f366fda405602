'''
Gear predictor-corrector coefficient sets

Both schemes carry position, velocity and three unscaled higher derivatives
(rd2 = acceleration, rd3, rd4). The predictor is a truncated Taylor expansion
and the corrector redistributes the acceleration residual
corr = force / mass - rd2 over the state.
'''
from dataclasses import dataclass
from abc import ABC, abstractmethod


@dataclass(frozen=True)
class PredictorCoefficients:
    a1: float
    a2: float
    a3: float
    a4: float
    vel_rd4: float      # weight of rd4 in the velocity update


@dataclass(frozen=True)
class CorrectorCoefficients:
    c0: float           # position
    c1: float           # velocity
    c2: float           # rd2, applied on top of the true acceleration
    c3: float           # rd3
    c4: float           # rd4


def taylor_coefficients(dt: float):
    a1 = dt
    a2 = a1 * dt / 2.0
    a3 = a2 * dt / 3.0
    a4 = a3 * dt / 4.0
    return a1, a2, a3, a4


class IntegratorConfig(ABC):
    """Base class for predictor-corrector schemes."""

    @abstractmethod
    def get_scheme_name(self) -> str:
        pass

    @abstractmethod
    def predictor_coefficients(self, dt: float) -> PredictorCoefficients:
        pass

    @abstractmethod
    def corrector_coefficients(self, dt: float) -> CorrectorCoefficients:
        pass


@dataclass
class ReferenceGearConfig(IntegratorConfig):
    """
    Fourth-order Gear variant of the reference granular code.

    The velocity prediction weights rd4 with a4 instead of a3, the corrector
    adds the 3/(2 dt) gain to rd2 and leaves rd3 alone. With these gains the
    rd2 residual is amplified by roughly 3/(2 dt) per step, so long runs with
    dt below ~1.5 time units grow without bound. Kept exactly as published.
    """

    def get_scheme_name(self) -> str:
        return "reference"

    def predictor_coefficients(self, dt: float) -> PredictorCoefficients:
        a1, a2, a3, a4 = taylor_coefficients(dt)
        return PredictorCoefficients(a1, a2, a3, a4, vel_rd4=a4)

    def corrector_coefficients(self, dt: float) -> CorrectorCoefficients:
        return CorrectorCoefficients(
            c0=19.0 / 180.0 * dt ** 2,
            c1=3.0 / 8.0 * dt,
            c2=3.0 / 2.0 / dt,
            c3=0.0,
            c4=1.0 / dt ** 2,
        )


@dataclass
class StandardGearConfig(IntegratorConfig):
    """
    Five-value Gear corrector for second-order equations
    (19/120, 3/4, 1, 1/2, 1/12) expressed on unscaled derivatives.
    """

    def get_scheme_name(self) -> str:
        return "standard"

    def predictor_coefficients(self, dt: float) -> PredictorCoefficients:
        a1, a2, a3, a4 = taylor_coefficients(dt)
        return PredictorCoefficients(a1, a2, a3, a4, vel_rd4=a3)

    def corrector_coefficients(self, dt: float) -> CorrectorCoefficients:
        return CorrectorCoefficients(
            c0=19.0 / 240.0 * dt ** 2,
            c1=3.0 / 8.0 * dt,
            c2=0.0,
            c3=3.0 / 2.0 / dt,
            c4=1.0 / dt ** 2,
        )
