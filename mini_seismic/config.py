# mini_seismic/config.py
"""
Solver configuration and defaults.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SolverConfig:
    """Global solver configuration."""

    # Convergence of the equivalent-linear iteration:
    # |new - old| <= absolute_tolerance + relative_tolerance * |new|, entrywise
    relative_tolerance: float = 1.0e-12
    absolute_tolerance: float = 1.0e-15

    # Guards against non-terminating iteration
    max_iterations: int = 200
    deadline_seconds: Optional[float] = None

    # Modal superposition
    superposition: str = 'cqc'
    correlation_formula: str = 'asymmetric'

    def __post_init__(self):
        if self.relative_tolerance < 0 or self.absolute_tolerance < 0:
            raise ValueError("tolerances must be non-negative")
        if self.max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {self.max_iterations}")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ValueError(f"deadline_seconds must be positive, got {self.deadline_seconds}")
        if self.superposition not in ('srss', 'cqc'):
            raise ValueError(f"superposition must be 'srss' or 'cqc', got {self.superposition!r}")
        if self.correlation_formula not in ('asymmetric', 'symmetric'):
            raise ValueError(
                f"correlation_formula must be 'asymmetric' or 'symmetric', "
                f"got {self.correlation_formula!r}"
            )


# Global config instance
CONFIG = SolverConfig()
