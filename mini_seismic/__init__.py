# mini_seismic - Equivalent-linear seismic response of structures
"""
MINI-SEISMIC: Peak Seismic Response by Equivalent Linearization
===============================================================

This package provides:
- Keyed block assembly with boundary-condition elimination
- Node-indexed composition of element matrices
- Modal analysis with SRSS / CQC response spectrum superposition
- The equivalent-linear fixed-point solver for nonlinear structures

ARCHITECTURE:
-------------
    kernel/         Assembly, modal analysis and the fixed-point solver
    hysteresis.py   Secant stiffness and damping of hysteresis models
    elements.py     Two-node spring element
    loads.py        Acceleration response spectra
    model.py        Lumped-mass shear building model
    checks/         Empirical wall models (mud plaster, wooden siding)
    config.py       Solver defaults
"""

from .config import CONFIG, SolverConfig
from .kernel import (
    KeyedAssembly,
    BoundaryConditionError,
    compose,
    normal_modes,
    participation_factors,
    superimpose,
    mode_correlation_coefficients,
    linear_modal_response,
    stiffness_proportional_damping,
    mass_proportional_damping,
    strain_energy_proportional_damping,
    modal_analysis,
    limit_strength_response,
    MechanismError,
    ConvergenceError,
)
from .hysteresis import LinearHysteresis, PeakOrientedHysteresis
from .elements import Spring
from .loads import STANDARD_GRAVITY, acceleration_spectrum, normalized_acceleration_response_spectrum
from .model import ShearBuilding

__all__ = [
    'CONFIG', 'SolverConfig',
    'KeyedAssembly', 'BoundaryConditionError', 'compose',
    'normal_modes', 'participation_factors', 'superimpose', 'mode_correlation_coefficients',
    'linear_modal_response', 'stiffness_proportional_damping', 'mass_proportional_damping',
    'strain_energy_proportional_damping', 'modal_analysis',
    'limit_strength_response', 'MechanismError', 'ConvergenceError',
    'LinearHysteresis', 'PeakOrientedHysteresis', 'Spring',
    'STANDARD_GRAVITY', 'acceleration_spectrum', 'normalized_acceleration_response_spectrum',
    'ShearBuilding',
]

# Version
__version__ = "0.1.0"
