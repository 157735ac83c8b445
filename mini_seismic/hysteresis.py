# mini_seismic/hysteresis.py
"""
HYSTERESIS MODELS: Secant Stiffness and Equivalent Damping
==========================================================

PURPOSE:
--------
Equivalent linearization replaces a nonlinear element, at a given peak
distortion x, by a linear spring with

    k_eq(x) = Q(x) / x          (secant of the skeleton curve Q)
    h_eq(x) = hysteretic damping ratio of one full cycle up to x

Every model implements the same three methods, so elements and structural
models can mix them freely:

    LinearHysteresis        constant stiffness, no hysteretic damping
    PeakOrientedHysteresis  any skeleton curve, peak-oriented unloading rule

Concrete walls (mud plaster, ...) live in mini_seismic.checks and return
one of these objects.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional


Skeleton = Callable[[float], float]


def equivalent_stiffness(maximum_distortion: float, skeleton: Skeleton) -> float:
    """
    Secant stiffness Q(x)/x of a skeleton curve.

    >>> equivalent_stiffness(0.01, lambda x: 120 * x)
    120.0
    >>> equivalent_stiffness(0.1, lambda x: 15)
    150.0

    Raises:
        ValueError: If the distortion is zero
    """
    if maximum_distortion == 0:
        raise ValueError("secant stiffness is undefined at zero distortion")
    return skeleton(maximum_distortion) / maximum_distortion


def equivalent_damping_ratio(
    maximum_distortion: float,
    skeleton: Skeleton,
    rule: str = 'peak_oriented',
    unloading_stiffness: Optional[float] = None
) -> float:
    """
    Equivalent damping ratio of one cycle up to `maximum_distortion`.

    For the peak-oriented rule the loop area gives

        h = (0.5 - 0.5·k_eq/k_u) / π    if k_eq <= k_u
        h = 0                           if k_eq >  k_u
        h = 0.5 / π                     without unloading stiffness

    >>> equivalent_damping_ratio(0.1, lambda x: 12, unloading_stiffness=150)
    0.03183098861837906
    """
    if rule != 'peak_oriented':
        raise ValueError(f"Unknown hysteresis rule {rule!r}. Use 'peak_oriented'")
    if unloading_stiffness is None:
        return 0.5 / math.pi
    return _peak_oriented_damping(equivalent_stiffness(maximum_distortion, skeleton), unloading_stiffness)


def _peak_oriented_damping(stiffness: float, unloading_stiffness: Optional[float]) -> float:
    if unloading_stiffness is None:
        return 0.5 / math.pi
    if stiffness <= unloading_stiffness:
        return (0.5 - 0.5 * stiffness / unloading_stiffness) / math.pi
    return 0.0


class Hysteresis(ABC):
    """Force-distortion behaviour of one element."""

    @abstractmethod
    def skeleton(self, distortion: float) -> float:
        """Force on the backbone curve at `distortion`."""

    @abstractmethod
    def equivalent_stiffness(self, distortion: float) -> float:
        """Secant stiffness at peak `distortion`; initial stiffness at zero."""

    @abstractmethod
    def equivalent_damping_ratio(self, distortion: float) -> float:
        """Hysteretic damping ratio at peak `distortion`."""


@dataclass(frozen=True)
class LinearHysteresis(Hysteresis):
    """
    Completely linear elastic behaviour.

    >>> LinearHysteresis(120900.8).equivalent_stiffness(0.012)
    120900.8
    >>> LinearHysteresis(120900.8).equivalent_damping_ratio(0.08)
    0.0
    """
    constant: float

    def __post_init__(self):
        if self.constant < 0:
            raise ValueError(f"spring constant must be non-negative, got {self.constant}")

    def skeleton(self, distortion: float) -> float:
        return self.constant * distortion

    def equivalent_stiffness(self, distortion: float) -> float:
        return self.constant

    def equivalent_damping_ratio(self, distortion: float) -> float:
        return 0.0


@dataclass(frozen=True)
class PeakOrientedHysteresis(Hysteresis):
    """
    Nonlinear skeleton curve with peak-oriented unloading.

    Parameters:
    -----------
    skeleton_curve : callable
        Q(x), force on the backbone for distortion x (odd function)
    initial_stiffness : float
        Stiffness used at zero distortion, where the secant is undefined
    unloading_stiffness : float, optional
        Slope of the unloading branch. Without it the loop is the widest
        peak-oriented one (h = 0.5/π).
    """
    skeleton_curve: Skeleton
    initial_stiffness: float
    unloading_stiffness: Optional[float] = None

    def __post_init__(self):
        if not self.initial_stiffness > 0:
            raise ValueError(f"initial stiffness must be positive, got {self.initial_stiffness}")
        if self.unloading_stiffness is not None and not self.unloading_stiffness > 0:
            raise ValueError(f"unloading stiffness must be positive, got {self.unloading_stiffness}")

    def skeleton(self, distortion: float) -> float:
        return self.skeleton_curve(distortion)

    def equivalent_stiffness(self, distortion: float) -> float:
        if distortion == 0:
            return self.initial_stiffness
        return equivalent_stiffness(distortion, self.skeleton_curve)

    def equivalent_damping_ratio(self, distortion: float) -> float:
        if distortion == 0:
            return _peak_oriented_damping(self.initial_stiffness, self.unloading_stiffness)
        return equivalent_damping_ratio(
            distortion, self.skeleton_curve, unloading_stiffness=self.unloading_stiffness
        )
