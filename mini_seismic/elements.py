# mini_seismic/elements.py
"""
SPRING ELEMENT: Two-Node Hysteretic Spring
==========================================

PURPOSE:
--------
A spring joins two keys of a KeyedAssembly (two floors, a floor and the
ground, two wall ends). Its force depends only on the relative displacement
projected by a transformation matrix T:

    δ = T · (u₂ - u₁)

At a peak distortion the spring behaves linearly with the secant stiffness
of its hysteresis model, k_eq(|δ|), so the element matrix is

    ke = [  P  -P ]      P = k_eq · T
         [ -P   P ]

This is the same [B, -B; -B, B] structure as an axial bar, with the
direction cosine product B replaced by T.

Typical transformations:

    np.diag([1, 0, 0])        spring acting in x only (3 DOF nodes)
    Spring.along(h, [1, 1, 0]) spring along the x = y diagonal
    [[1.0]]                   single DOF per node (shear building)
"""

from dataclasses import dataclass
from typing import Hashable, List, Sequence, Tuple

import numpy as np

from .hysteresis import Hysteresis
from .kernel.dof import KeyedAssembly


@dataclass(frozen=True, eq=False)
class Spring:
    """
    Spring between two nodes governed by a hysteresis model.

    Parameters:
    -----------
    hysteresis : Hysteresis
        Force-distortion model (LinearHysteresis, PeakOrientedHysteresis, ...)
    transformation : np.ndarray
        Square matrix T (degrees × degrees) projecting relative nodal
        displacement onto the spring's deformation
    """
    hysteresis: Hysteresis
    transformation: np.ndarray

    def __post_init__(self):
        T = np.asarray(self.transformation, dtype=float)
        if T.ndim != 2 or T.shape[0] != T.shape[1]:
            raise ValueError(f"transformation must be a square matrix, got shape {T.shape}")
        object.__setattr__(self, 'transformation', T)

    @classmethod
    def along(cls, hysteresis: Hysteresis, direction: Sequence[float]) -> 'Spring':
        """Spring acting along `direction`, T = n·nᵀ with n the unit vector."""
        n = np.asarray(direction, dtype=float)
        length = np.linalg.norm(n)
        if n.ndim != 1 or length == 0:
            raise ValueError(f"direction must be a non-zero vector, got {direction!r}")
        n = n / length
        return cls(hysteresis, np.outer(n, n))

    @property
    def degrees(self) -> int:
        return self.transformation.shape[0]

    def element_distortion(self, keys: Sequence[Hashable], displacement: KeyedAssembly) -> np.ndarray:
        """
        δ = T·(u₂ - u₁), reading nodal displacements from an order-1 assembly.

        Fixed degrees read as zero, so a spring to a fixed ground key sees
        the absolute displacement of its other end.
        """
        key_1, key_2 = self._keys(keys)
        if displacement.order != 1:
            raise ValueError(f"displacement must be an order-1 assembly, got order {displacement.order}")
        u_1 = displacement.get([key_1])
        u_2 = displacement.get([key_2])
        if u_1.shape != (self.degrees,) or u_2.shape != (self.degrees,):
            raise ValueError(
                f"keys {key_1!r}, {key_2!r} must have {self.degrees} degrees each, "
                f"got {u_1.shape[0]} and {u_2.shape[0]}"
            )
        return self.transformation @ (u_2 - u_1)

    def distortion(self, keys: Sequence[Hashable], displacement: KeyedAssembly) -> float:
        """Scalar distortion passed to the hysteresis model, |δ|."""
        return float(np.linalg.norm(self.element_distortion(keys, displacement)))

    def partial_stiffness(self, keys: Sequence[Hashable], displacement: KeyedAssembly) -> np.ndarray:
        """P = k_eq(|δ|) · T."""
        k_eq = self.hysteresis.equivalent_stiffness(self.distortion(keys, displacement))
        return k_eq * self.transformation

    def equivalent_stiffness(
        self,
        keys: Sequence[Hashable],
        displacement: KeyedAssembly
    ) -> List[Tuple[Tuple[Hashable, Hashable], np.ndarray]]:
        """
        Element blocks at the current distortion.

        Returns:
            [((k1, k1), P), ((k1, k2), -P), ((k2, k1), -P), ((k2, k2), P)]
        """
        key_1, key_2 = self._keys(keys)
        P = self.partial_stiffness(keys, displacement)
        return [
            ((key_1, key_1), P),
            ((key_1, key_2), -P),
            ((key_2, key_1), -P),
            ((key_2, key_2), P),
        ]

    def add_to(self, stiffness: KeyedAssembly, keys: Sequence[Hashable], displacement: KeyedAssembly) -> None:
        """Scatter-add the element blocks into an order-2 assembly."""
        for block_keys, block in self.equivalent_stiffness(keys, displacement):
            stiffness.update(block_keys, lambda current, block=block: current + block)

    def equivalent_damping_ratio(self, keys: Sequence[Hashable], displacement: KeyedAssembly) -> float:
        return self.hysteresis.equivalent_damping_ratio(self.distortion(keys, displacement))

    def strain_energy_term(
        self,
        keys: Sequence[Hashable],
        displacement: KeyedAssembly,
        shape: KeyedAssembly
    ) -> Tuple[np.ndarray, np.ndarray, float]:
        """
        (local stiffness, local displacement, damping ratio) for
        strain_energy_proportional_damping.

        Stiffness and damping are evaluated at `displacement`; the energy is
        weighted with the nodal values of `shape` (usually a mode shape).
        """
        key_1, key_2 = self._keys(keys)
        P = self.partial_stiffness(keys, displacement)
        ke = np.block([[P, -P], [-P, P]])
        x = np.concatenate([shape.get([key_1]), shape.get([key_2])])
        return ke, x, self.equivalent_damping_ratio(keys, displacement)

    @staticmethod
    def _keys(keys: Sequence[Hashable]) -> Tuple[Hashable, Hashable]:
        keys = list(keys)
        if len(keys) != 2:
            raise ValueError(f"a spring connects exactly two keys, got {keys!r}")
        return keys[0], keys[1]
