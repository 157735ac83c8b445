# mini_seismic/kernel/modal.py
"""Modal analysis: normal modes, participation, modal superposition and damping matrices."""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

import numpy as np
import pandas as pd
from scipy.linalg import eig

from ..config import CONFIG
from .solve import MechanismError

logger = logging.getLogger(__name__)

SUPERPOSITION_METHODS = ('direct', 'srss', 'cqc')
CORRELATION_FORMULAS = ('asymmetric', 'symmetric')


def _square(name: str, matrix, degrees: Optional[int] = None) -> np.ndarray:
    matrix = np.asarray(matrix, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"{name} must be a square matrix, got shape {matrix.shape}")
    if degrees is not None and matrix.shape[0] != degrees:
        raise ValueError(f"{name} must be {degrees}×{degrees}, got shape {matrix.shape}")
    return matrix


def _diagonal(name: str, values) -> np.ndarray:
    """Accept either a diagonal matrix or a 1-D vector of per-mode values."""
    values = np.asarray(values, dtype=float)
    if values.ndim == 2 and values.shape[0] == values.shape[1]:
        return np.diag(values).copy()
    if values.ndim == 1:
        return values
    raise ValueError(f"{name} must be a diagonal matrix or a vector, got shape {values.shape}")


def normal_modes(mass, stiffness) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute natural angular frequencies and mode shapes.

    Solves K·φ = ω²·M·φ as the standard eigenproblem of M⁻¹·K. Modes are
    sorted by ascending frequency. Mode shapes are not mass-normalized.

    Args:
        mass: Mass matrix M (n x n)
        stiffness: Stiffness matrix K (n x n)

    Returns:
        frequencies: Diagonal matrix of natural angular frequencies ω (rad/s)
        modes: Mode shape matrix, column j is the shape of mode j

    Raises:
        ValueError: If the matrices are not square with matching shapes
        MechanismError: If any eigenvalue ω² is not positive
    """
    M = _square("mass", mass)
    K = _square("stiffness", stiffness, M.shape[0])

    eigenvalues, eigenvectors = eig(np.linalg.solve(M, K))
    eigenvalues = np.real(eigenvalues)
    eigenvectors = np.real(eigenvectors)

    if np.any(eigenvalues <= 0):
        raise MechanismError(
            f"Non-positive eigenvalue (min ω² = {eigenvalues.min():.3e}). "
            f"Stiffness is singular or has softened to a mechanism."
        )

    order = np.argsort(eigenvalues)
    omega = np.sqrt(eigenvalues[order])
    return np.diag(omega), eigenvectors[:, order]


def participation_factors(modes, mass, amplification) -> np.ndarray:
    """
    Solve (ΦᵀMΦ)·β = Φᵀ·p for the participation factors β.

    `amplification` is the force pattern p = M·r, where r is the
    influence vector of the ground motion (all ones for a shear building).

    >>> participation_factors(modes, M, M @ np.ones(n))
    """
    Phi = np.asarray(modes, dtype=float)
    M = _square("mass", mass, Phi.shape[0])
    p = np.asarray(amplification, dtype=float)
    if p.shape != (Phi.shape[0],):
        raise ValueError(f"amplification must have shape ({Phi.shape[0]},), got {p.shape}")
    return np.linalg.solve(Phi.T @ M @ Phi, Phi.T @ p)


def effective_modal_masses(modes, mass, amplification) -> np.ndarray:
    """
    Effective modal mass of each mode, (φᵀp)² / (φᵀMφ).

    Summed over all modes this equals rᵀMr, the total mass in the
    direction of excitation.
    """
    Phi = np.asarray(modes, dtype=float)
    M = _square("mass", mass, Phi.shape[0])
    p = np.asarray(amplification, dtype=float)
    m_star = np.einsum('ij,ik,kj->j', Phi, M, Phi)
    L = Phi.T @ p
    return L**2 / m_star


def superimpose(modal_response, method: str, modes, correlations=None) -> np.ndarray:
    """
    Combine modal responses q into a response per degree of freedom.

    Methods:
        'direct': Φ·q, the exact sum when modal peaks happen simultaneously
        'srss':   sqrt(Σ_j (Φ_ij q_j)²), for well separated modes
        'cqc':    sqrt(Σ_j Σ_k ρ_jk r_ij r_ik) with r_ij = Φ_ij q_j

    Args:
        modal_response: Modal peak responses q (n_modes,)
        method: 'direct', 'srss' or 'cqc'
        modes: Mode shape matrix (n_dof x n_modes)
        correlations: Mode correlation matrix ρ (n_modes x n_modes), 'cqc' only

    Returns:
        Response vector (n_dof,)
    """
    q = np.asarray(modal_response, dtype=float)
    Phi = np.asarray(modes, dtype=float)
    if Phi.ndim != 2 or q.shape != (Phi.shape[1],):
        raise ValueError(
            f"modal response of shape {q.shape} does not match modes of shape {Phi.shape}"
        )

    if method == 'direct':
        return Phi @ q

    contributions = Phi * q  # column j scaled by q_j
    if method == 'srss':
        return np.sqrt(np.sum(contributions**2, axis=1))

    if method == 'cqc':
        if correlations is None:
            raise ValueError("'cqc' superposition needs a mode correlation matrix")
        rho = _square("correlations", correlations, Phi.shape[1])
        return np.sqrt(np.einsum('ij,jk,ik->i', contributions, rho, contributions))

    raise ValueError(f"Unknown superposition method {method!r}. Use one of {SUPERPOSITION_METHODS}")


def mode_correlation_coefficients(
    natural_frequencies,
    damping_ratios,
    formula: Optional[str] = None
) -> np.ndarray:
    """
    Mode correlation coefficients ρ_jk for CQC superposition.

    With r = ω_j/ω_k and damping ratios h_j, h_k:

    'asymmetric':
        ρ_jk = 2·sqrt(h_j h_k r³)(h_j + r h_k)
               / (0.25(1 - r)² + h_j h_k r(1 + r²) + (h_j² + h_k²) r²)

    'symmetric' (Der Kiureghian, 1981):
        ρ_jk = 8·sqrt(h_j h_k)(h_j + r h_k) r^1.5
               / ((1 - r²)² + 4 h_j h_k r(1 + r²) + 4(h_j² + h_k²) r²)

    The diagonal is 1 in both cases.

    Args:
        natural_frequencies: ω per mode, as a diagonal matrix or a vector
        damping_ratios: h per mode, as a diagonal matrix or a vector
        formula: 'asymmetric' or 'symmetric'; defaults to CONFIG.correlation_formula

    Returns:
        ρ (n_modes x n_modes)
    """
    formula = formula or CONFIG.correlation_formula
    omega = _diagonal("natural_frequencies", natural_frequencies)
    h = _diagonal("damping_ratios", damping_ratios)
    if omega.shape != h.shape:
        raise ValueError(
            f"{omega.shape[0]} frequencies but {h.shape[0]} damping ratios were given"
        )

    r = omega[:, None] / omega[None, :]
    hj = h[:, None]
    hk = h[None, :]

    with np.errstate(divide='ignore', invalid='ignore'):
        rho = _correlation(formula, r, hj, hk)

    # Coincident modes with equal damping are fully correlated, undamped included
    rho[(r == 1) & (hj == hk)] = 1.0
    np.fill_diagonal(rho, 1.0)
    return rho


def _correlation(formula, r, hj, hk):
    if formula == 'asymmetric':
        return 2 * np.sqrt(hj * hk * r**3) * (hj + r * hk) / (
            0.25 * (1 - r)**2 + hj * hk * r * (1 + r**2) + (hj**2 + hk**2) * r**2
        )
    if formula == 'symmetric':
        return 8 * np.sqrt(hj * hk) * (hj + r * hk) * r**1.5 / (
            (1 - r**2)**2 + 4 * hj * hk * r * (1 + r**2) + 4 * (hj**2 + hk**2) * r**2
        )
    raise ValueError(f"Unknown correlation formula {formula!r}. Use one of {CORRELATION_FORMULAS}")


def modal_damping_ratios(modes, mass, damping, natural_frequencies) -> np.ndarray:
    """
    Damping ratio of each mode, diag(solve(2·ΦᵀMΦ·Ω, ΦᵀCΦ)).

    Off-diagonal terms of ΦᵀCΦ (non-classical damping) are ignored.
    """
    Phi = np.asarray(modes, dtype=float)
    n = Phi.shape[0]
    M = _square("mass", mass, n)
    C = _square("damping", damping, n)
    omega = _diagonal("natural_frequencies", natural_frequencies)

    generalized = 2 * (Phi.T @ M @ Phi) @ np.diag(omega)
    return np.diag(np.linalg.solve(generalized, Phi.T @ C @ Phi)).copy()


def linear_modal_response(
    mass,
    damping,
    stiffness,
    amplification,
    acceleration_spectrum: Callable[[float, float], float],
    method: str = 'cqc',
    formula: Optional[str] = None
) -> np.ndarray:
    """
    Peak response of a linear system to an acceleration response spectrum.

    ALGORITHM:
    ----------
    1. ω, Φ from normal_modes(M, K)
    2. β from participation_factors(Φ, M, amplification)
    3. h_j from modal_damping_ratios(Φ, M, C, ω)
    4. q_j = β_j · Sa(2π/ω_j, h_j) / ω_j²
    5. superimpose q with 'srss' or 'cqc'

    Args:
        mass, damping, stiffness: System matrices (n x n)
        amplification: Force pattern M·r (n,)
        acceleration_spectrum: Function(natural_period, damping_ratio) -> Sa
        method: 'srss' or 'cqc'
        formula: CQC correlation formula, see mode_correlation_coefficients

    Returns:
        Peak displacement per degree of freedom (n,)
    """
    if method not in ('srss', 'cqc'):
        raise ValueError(f"linear_modal_response supports 'srss' or 'cqc', got {method!r}")

    M = _square("mass", mass)
    n = M.shape[0]
    C = _square("damping", damping, n)
    K = _square("stiffness", stiffness, n)

    frequencies, modes = normal_modes(M, K)
    omega = np.diag(frequencies)
    beta = participation_factors(modes, M, amplification)
    h = modal_damping_ratios(modes, M, C, omega)

    q = np.zeros(n)
    for j in range(n):
        period = 2 * np.pi / omega[j]
        sa = acceleration_spectrum(period, h[j])
        q[j] = beta[j] * sa / omega[j]**2
        logger.debug("mode %d: T=%.4f s, h=%.4f, Sa=%.4f, q=%.6g", j + 1, period, h[j], sa, q[j])

    if method == 'srss':
        return superimpose(q, 'srss', modes)
    return superimpose(q, 'cqc', modes, mode_correlation_coefficients(omega, h, formula))


# ----------------------------------------------------------------------
# Damping matrices
# ----------------------------------------------------------------------

def _check_frequency_and_ratio(natural_angular_frequency: float, damping_ratio: float) -> None:
    if not natural_angular_frequency > 0:
        raise ValueError(
            f"natural angular frequency must be positive, got {natural_angular_frequency}"
        )
    if not damping_ratio >= 0:
        raise ValueError(f"damping ratio must be non-negative, got {damping_ratio}")


def stiffness_proportional_damping(stiffness, natural_angular_frequency: float, damping_ratio: float) -> np.ndarray:
    """C = K · 2ζ/ω, giving ratio ζ at frequency ω."""
    _check_frequency_and_ratio(natural_angular_frequency, damping_ratio)
    return _square("stiffness", stiffness) * (2 * damping_ratio / natural_angular_frequency)


def mass_proportional_damping(mass, natural_angular_frequency: float, damping_ratio: float) -> np.ndarray:
    """C = M · 2ζω, giving ratio ζ at frequency ω."""
    _check_frequency_and_ratio(natural_angular_frequency, damping_ratio)
    return _square("mass", mass) * (2 * damping_ratio * natural_angular_frequency)


def rayleigh_damping(
    mass,
    stiffness,
    omega_1: float,
    omega_2: float,
    damping_ratio: float
) -> np.ndarray:
    """
    Rayleigh damping C = a0·M + a1·K with ratio ζ at both ω1 and ω2.

        a0 = 2ζ·ω1·ω2 / (ω1 + ω2)
        a1 = 2ζ / (ω1 + ω2)
    """
    _check_frequency_and_ratio(omega_1, damping_ratio)
    _check_frequency_and_ratio(omega_2, damping_ratio)
    M = _square("mass", mass)
    K = _square("stiffness", stiffness, M.shape[0])

    a0 = 2 * damping_ratio * omega_1 * omega_2 / (omega_1 + omega_2)
    a1 = 2 * damping_ratio / (omega_1 + omega_2)
    return a0 * M + a1 * K


def strain_energy_proportional_damping(elements: Iterable[Tuple[np.ndarray, np.ndarray, float]]) -> float:
    """
    Strain-energy weighted damping ratio Σ(E_i·ζ_i) / Σ(E_i).

    Each element is a triple (local stiffness k, local distortion x,
    damping ratio ζ) with E = xᵀ·k·x.

    Raises:
        ValueError: If shapes disagree, a ratio is negative or the total
            strain energy is zero
    """
    weighted = 0.0
    total = 0.0
    for number, (k, x, ratio) in enumerate(elements):
        k = np.asarray(k, dtype=float)
        x = np.asarray(x, dtype=float)
        if k.ndim != 2 or k.shape != (x.shape[0], x.shape[0]) or x.ndim != 1:
            raise ValueError(
                f"element {number}: stiffness {k.shape} does not match distortion {x.shape}"
            )
        if not ratio >= 0:
            raise ValueError(f"element {number}: damping ratio must be non-negative, got {ratio}")
        energy = x @ k @ x
        weighted += energy * ratio
        total += energy

    if total == 0:
        raise ValueError("total strain energy is zero; damping ratio is undefined")
    return weighted / total


# ----------------------------------------------------------------------
# Summary
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class ModalResult:
    """
    Modal properties of a linear system.

    Attributes:
        frequencies: Natural angular frequencies ω (n_modes,)
        modes: Mode shapes (n_dof x n_modes)
        participation: Participation factors β (n_modes,), or None
        damping_ratios: Modal damping ratios (n_modes,), or None
        effective_masses: Effective modal masses (n_modes,), or None
    """
    frequencies: np.ndarray
    modes: np.ndarray
    participation: Optional[np.ndarray] = None
    damping_ratios: Optional[np.ndarray] = None
    effective_masses: Optional[np.ndarray] = None

    @property
    def periods(self) -> np.ndarray:
        return 2 * np.pi / self.frequencies

    def to_frame(self) -> pd.DataFrame:
        """One row per mode, ready for printing or export."""
        data = {
            'mode': np.arange(1, len(self.frequencies) + 1),
            'omega_rad_s': self.frequencies,
            'frequency_hz': self.frequencies / (2 * np.pi),
            'period_s': self.periods,
        }
        if self.participation is not None:
            data['participation'] = self.participation
        if self.damping_ratios is not None:
            data['damping_ratio'] = self.damping_ratios
        if self.effective_masses is not None:
            data['effective_mass'] = self.effective_masses
            data['mass_ratio'] = self.effective_masses / self.effective_masses.sum()
        return pd.DataFrame(data)


def modal_analysis(mass, stiffness, damping=None, amplification=None) -> ModalResult:
    """
    Run the full modal characterisation of a system.

    Without `amplification` the participation factors and effective masses
    are computed for a uniform ground motion, p = M·1.
    """
    M = _square("mass", mass)
    frequencies, modes = normal_modes(M, stiffness)
    omega = np.diag(frequencies).copy()

    p = M @ np.ones(M.shape[0]) if amplification is None else np.asarray(amplification, dtype=float)
    ratios = None if damping is None else modal_damping_ratios(modes, M, damping, omega)

    return ModalResult(
        frequencies=omega,
        modes=modes,
        participation=participation_factors(modes, M, p),
        damping_ratios=ratios,
        effective_masses=effective_modal_masses(modes, M, p),
    )
