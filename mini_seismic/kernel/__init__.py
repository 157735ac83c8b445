# mini_seismic/kernel - Assembly, modal analysis and equivalent-linear solve
"""
KERNEL: THE SEISMIC RESPONSE CORE
=================================

This package contains the pieces every equivalent-linear analysis needs,
whatever the structure is made of:

- KeyedAssembly: system matrices addressed by named blocks, with fixed
  degrees of freedom eliminated on the fly
- compose: assembly of local element blocks indexed by node ids
- modal: normal modes, participation, SRSS/CQC superposition, damping
- solve: the fixed-point iteration that couples a nonlinear model to the
  modal response spectrum analysis

The STRUCTURE-specific parts (hysteresis curves, springs, walls, shear
buildings) live outside the kernel and only talk to it through plain
numpy arrays and callables.
"""

from .dof import KeyedAssembly, Degree, FREE, FIXED, BoundaryConditionError
from .assemble import compose, compose_vector
from .modal import (
    normal_modes,
    participation_factors,
    effective_modal_masses,
    superimpose,
    mode_correlation_coefficients,
    modal_damping_ratios,
    linear_modal_response,
    stiffness_proportional_damping,
    mass_proportional_damping,
    rayleigh_damping,
    strain_energy_proportional_damping,
    modal_analysis,
    ModalResult,
)
from .solve import limit_strength_response, in_tolerance, MechanismError, ConvergenceError

__all__ = [
    'KeyedAssembly', 'Degree', 'FREE', 'FIXED', 'BoundaryConditionError',
    'compose', 'compose_vector',
    'normal_modes', 'participation_factors', 'effective_modal_masses', 'superimpose',
    'mode_correlation_coefficients', 'modal_damping_ratios', 'linear_modal_response',
    'stiffness_proportional_damping', 'mass_proportional_damping', 'rayleigh_damping',
    'strain_energy_proportional_damping', 'modal_analysis', 'ModalResult',
    'limit_strength_response', 'in_tolerance', 'MechanismError', 'ConvergenceError',
]
