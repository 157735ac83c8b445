# loads.py - Seismic acceleration response spectra

from typing import Callable

import numpy as np

# Standard acceleration due to gravity (m/s²)
STANDARD_GRAVITY = 9.80665


def normalized_acceleration_response_spectrum(
    peak: float,
    corner_period_short: float,
    corner_period_long: float
) -> Callable[[float], float]:
    """
    Build a three-branch acceleration response spectrum Sa(T).

    The curve rises linearly from 0.4·peak at T = 0 to the plateau at the
    short corner period, stays constant up to the long corner period, and
    then decays as 1/T (constant velocity branch):

        Sa(T) = peak · (0.4 + 0.6·T/Tb)     T < Tb
        Sa(T) = peak                        Tb <= T < Tc
        Sa(T) = peak · Tc / T               T >= Tc

    Parameters:
    -----------
    peak : float
        Plateau acceleration (m/s²), must be positive
    corner_period_short : float
        Tb, end of the ascending branch (s)
    corner_period_long : float
        Tc, end of the plateau (s), Tc >= Tb

    Returns:
    --------
    callable
        Function(natural_period) -> spectral acceleration

    Examples:
    --------
    >>> Sa = normalized_acceleration_response_spectrum(4.8, 0.16, 0.64)
    >>> Sa(0.08)
    3.36
    >>> Sa(1.28)
    2.4
    """
    if not peak > 0:
        raise ValueError(f"peak acceleration must be positive, got {peak}")
    if not 0 < corner_period_short <= corner_period_long:
        raise ValueError(
            f"corner periods must satisfy 0 < Tb <= Tc, got Tb={corner_period_short}, "
            f"Tc={corner_period_long}"
        )

    def spectrum(natural_period: float) -> float:
        if natural_period < 0:
            raise ValueError(f"natural period must be non-negative, got {natural_period}")
        if natural_period < corner_period_short:
            return peak * (0.4 + 0.6 * natural_period / corner_period_short)
        if natural_period < corner_period_long:
            return peak
        return peak * corner_period_long / natural_period

    return spectrum


def damping_reduction_factor(damping_ratio: float) -> float:
    """
    Fh = 1.5 / (1 + 10h), scaling a 5 %-damped spectrum to ratio h.

    Fh = 1 at h = 0.05.
    """
    if damping_ratio < 0:
        raise ValueError(f"damping ratio must be non-negative, got {damping_ratio}")
    return 1.5 / (1 + 10 * damping_ratio)


def acceleration_spectrum(
    peak: float,
    corner_period_short: float,
    corner_period_long: float
) -> Callable[[float, float], float]:
    """
    Damping-dependent spectrum Sa(T, h) = Sa(T) · Fh(h).

    This is the callable expected by linear_modal_response and
    limit_strength_response.
    """
    base = normalized_acceleration_response_spectrum(peak, corner_period_short, corner_period_long)

    def spectrum(natural_period: float, damping_ratio: float) -> float:
        return base(natural_period) * damping_reduction_factor(damping_ratio)

    return spectrum


def spectrum_table(spectrum: Callable[[float, float], float], periods, damping_ratio: float = 0.05) -> np.ndarray:
    """Evaluate a (T, h) spectrum on an array of periods."""
    return np.array([spectrum(float(T), damping_ratio) for T in np.asarray(periods, dtype=float)])
