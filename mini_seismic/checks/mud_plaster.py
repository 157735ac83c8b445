# mini_seismic/checks/mud_plaster.py
"""
Mud plaster wall skeleton curve for traditional wooden buildings.

Follows the shear stress - drift angle table of 'A manual of aseismic design
method for traditional wooden buildings including specific techniques for
unfixing column bases to foundation stones' (2019). Lengths in m, forces in N.
"""

from typing import Callable

import numpy as np

from ..hysteresis import PeakOrientedHysteresis

# Drift angle breakpoints (rad)
DRIFT_ANGLES = np.array([0.0, 1 / 480, 1 / 240, 1 / 120, 1 / 90, 1 / 60, 1 / 45, 1 / 30, 1 / 20, 1 / 15, 1 / 10])

# Stress per unit wall width, governed by the panel width (kN/m² per m)
WIDTH_STRESS = np.array([0.0, 30, 54, 86, 96, 98, 93, 84, 72, 58, 34])

# Stress governed by the panel aspect, multiplied by 3.25·ratio
ASPECT_STRESS = np.array([0.0, 15, 28, 48, 60, 70, 68, 65, 60, 52, 32])

ASPECT_FACTOR = 3.25


def _check_positive(**values: float) -> None:
    for name, value in values.items():
        if not value > 0:
            raise ValueError(f"{name} must be positive, got {value}")


def _aspect_ratio(inner_height: float, inner_width: float) -> float:
    if inner_height > inner_width:
        return inner_width * inner_width / inner_height
    return inner_height


def _interpolate(drift: float, values: np.ndarray) -> float:
    """Piecewise linear on DRIFT_ANGLES, extrapolating the last segment."""
    if drift >= DRIFT_ANGLES[-2]:
        x0, x1 = DRIFT_ANGLES[-2], DRIFT_ANGLES[-1]
        y0, y1 = values[-2], values[-1]
        return y0 + (drift - x0) / (x1 - x0) * (y1 - y0)
    return float(np.interp(drift, DRIFT_ANGLES, values))


def mud_plaster_wall_skeleton(
    structural_height: float,
    inner_height: float,
    inner_width: float,
    thickness: float
) -> Callable[[float], float]:
    """
    Shear force - distortion backbone of one mud plaster wall panel.

    Args:
        structural_height: Story height H used for the drift angle (m)
        inner_height: Clear height of the panel between beams (m)
        inner_width: Clear width of the panel between columns (m)
        thickness: Plaster thickness (m)

    Returns:
        Function(distortion in m) -> shear force in N, odd in distortion,
        never changing sign beyond 1/10 rad

    Raises:
        ValueError: If any dimension is not positive

    >>> mud_plaster_wall_skeleton(2.9, 2.6, 0.805, 0.06)(0.012)
    1352.137681034483
    """
    _check_positive(
        structural_height=structural_height, inner_height=inner_height,
        inner_width=inner_width, thickness=thickness
    )
    ratio = _aspect_ratio(inner_height, inner_width)

    def skeleton(distortion: float) -> float:
        drift = abs(distortion) / structural_height
        stress = min(
            inner_width * _interpolate(drift, WIDTH_STRESS),
            _interpolate(drift, ASPECT_STRESS) * ASPECT_FACTOR * ratio,
        )
        stress = max(stress, 0.0)
        return (-stress if distortion < 0 else stress) * thickness * 1000

    return skeleton


def mud_plaster_wall_initial_stiffness(
    structural_height: float,
    inner_height: float,
    inner_width: float,
    thickness: float
) -> float:
    """Slope of the first skeleton segment (N/m)."""
    _check_positive(
        structural_height=structural_height, inner_height=inner_height,
        inner_width=inner_width, thickness=thickness
    )
    ratio = _aspect_ratio(inner_height, inner_width)
    first_drift = DRIFT_ANGLES[1]
    stress_per_drift = min(
        inner_width * WIDTH_STRESS[1] / first_drift,
        ASPECT_STRESS[1] / first_drift * ASPECT_FACTOR * ratio,
    )
    return stress_per_drift * thickness / structural_height * 1000


def mud_plaster_wall(
    structural_height: float,
    inner_height: float,
    inner_width: float,
    thickness: float
) -> PeakOrientedHysteresis:
    """
    Peak-oriented hysteresis of a mud plaster wall.

    Initial and unloading stiffness are both the slope of the first
    skeleton segment.
    """
    stiffness = mud_plaster_wall_initial_stiffness(structural_height, inner_height, inner_width, thickness)
    return PeakOrientedHysteresis(
        skeleton_curve=mud_plaster_wall_skeleton(structural_height, inner_height, inner_width, thickness),
        initial_stiffness=stiffness,
        unloading_stiffness=stiffness,
    )
