# mini_seismic/kernel/solve.py
"""Equivalent-linear fixed-point solver for peak seismic distortion."""

import logging
import time
from typing import Callable, Optional, Tuple

import numpy as np

from ..config import CONFIG

logger = logging.getLogger(__name__)


class MechanismError(RuntimeError):
    """Raised when the stiffness matrix has a zero or negative mode."""
    pass


class ConvergenceError(RuntimeError):
    """
    Raised when the iterative solution does not converge.

    Attributes:
        distortion: Last candidate distortion computed before giving up
        iterations: Number of iterations performed
    """

    def __init__(self, message: str, distortion: Optional[np.ndarray] = None, iterations: int = 0):
        super().__init__(message)
        self.distortion = distortion
        self.iterations = iterations


Model = Callable[[np.ndarray], Tuple[np.ndarray, np.ndarray, np.ndarray]]


def in_tolerance(
    previous: np.ndarray,
    current: np.ndarray,
    relative_tolerance: float,
    absolute_tolerance: float
) -> bool:
    """
    Entrywise check |current - previous| <= atol + rtol·|current|.

    Both tolerances 0 means exact equality.
    """
    previous = np.asarray(previous, dtype=float)
    current = np.asarray(current, dtype=float)
    if previous.shape != current.shape:
        raise ValueError(f"cannot compare shapes {previous.shape} and {current.shape}")
    return bool(np.all(
        np.abs(current - previous) <= absolute_tolerance + relative_tolerance * np.abs(current)
    ))


def _system(model: Model, distortion: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    mass, damping, stiffness = (np.asarray(m, dtype=float) for m in model(distortion))
    degrees = distortion.shape[0]
    for name, matrix in (('mass', mass), ('damping', damping), ('stiffness', stiffness)):
        if matrix.shape != (degrees, degrees):
            raise ValueError(
                f"model returned {name} of shape {matrix.shape}, expected {(degrees, degrees)}"
            )
    return mass, damping, stiffness


def limit_strength_response(
    model: Model,
    initial_distortion,
    acceleration_spectrum: Callable[[float, float], float],
    method: Optional[str] = None,
    relative_tolerance: Optional[float] = None,
    absolute_tolerance: Optional[float] = None,
    max_iterations: Optional[int] = None,
    deadline_seconds: Optional[float] = None,
    formula: Optional[str] = None
) -> np.ndarray:
    """
    Peak distortion of a nonlinear structure by equivalent linearization.

    Iterates d → linear_modal_response(model(d)) until two consecutive
    distortions agree within tolerance.

    ALGORITHM:
    ----------
    d = initial_distortion
    repeat:
        M, C, K = model(d)
        d_new = linear_modal_response(M, C, K, M·1, Sa, method)
        if in_tolerance(d, d_new): return d_new
        d = d_new

    Args:
        model: Function(distortion) -> (mass, damping, stiffness), the secant
            linear system at that distortion
        initial_distortion: Starting distortion, one value per DOF
        acceleration_spectrum: Function(natural_period, damping_ratio) -> Sa
        method: 'srss' or 'cqc' (default CONFIG.superposition)
        relative_tolerance: Default CONFIG.relative_tolerance
        absolute_tolerance: Default CONFIG.absolute_tolerance
        max_iterations: Default CONFIG.max_iterations
        deadline_seconds: Wall-clock limit, default CONFIG.deadline_seconds
        formula: CQC correlation formula, default CONFIG.correlation_formula

    Returns:
        Converged distortion vector

    Raises:
        ConvergenceError: If the iteration cap or the deadline is reached
        MechanismError: If the model's stiffness loses positive definiteness
        ValueError: If the model returns matrices of the wrong shape
    """
    from .modal import linear_modal_response

    method = method or CONFIG.superposition
    if method not in ('srss', 'cqc'):
        raise ValueError(f"method must be 'srss' or 'cqc', got {method!r}")
    rtol = CONFIG.relative_tolerance if relative_tolerance is None else relative_tolerance
    atol = CONFIG.absolute_tolerance if absolute_tolerance is None else absolute_tolerance
    max_iter = CONFIG.max_iterations if max_iterations is None else max_iterations
    deadline = CONFIG.deadline_seconds if deadline_seconds is None else deadline_seconds
    if max_iter < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iter}")
    if deadline is not None and deadline <= 0:
        raise ValueError(f"deadline_seconds must be positive, got {deadline}")

    distortion = np.asarray(initial_distortion, dtype=float)
    if distortion.ndim != 1:
        raise ValueError(f"initial distortion must be a vector, got shape {distortion.shape}")

    started = time.monotonic()
    for iteration in range(1, max_iter + 1):
        mass, damping, stiffness = _system(model, distortion)
        response = linear_modal_response(
            mass, damping, stiffness, mass @ np.ones(distortion.shape[0]),
            acceleration_spectrum, method, formula
        )

        change = np.max(np.abs(response - distortion)) if response.size else 0.0
        logger.debug("iteration %d: max change %.3e", iteration, change)

        if in_tolerance(distortion, response, rtol, atol):
            logger.info("equivalent linearization converged after %d iterations", iteration)
            return response

        distortion = response
        if deadline is not None and time.monotonic() - started > deadline:
            logger.warning("equivalent linearization stopped by deadline at iteration %d", iteration)
            raise ConvergenceError(
                f"Equivalent linearization exceeded the {deadline:g} s deadline "
                f"after {iteration} iterations. Final change: {change:.2e}",
                distortion=distortion,
                iterations=iteration,
            )

    logger.warning("equivalent linearization did not converge in %d iterations", max_iter)
    raise ConvergenceError(
        f"Equivalent linearization did not converge after {max_iter} iterations. "
        f"Final change: {change:.2e}, tolerance: {rtol:.2e} (relative) / {atol:.2e} (absolute)",
        distortion=distortion,
        iterations=max_iter,
    )
