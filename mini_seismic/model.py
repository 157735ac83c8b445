# mini_seismic/model.py
"""
SHEAR BUILDING: Lumped-Mass Model for Equivalent Linearization
==============================================================

PURPOSE:
--------
A multi-storey building idealised as floor masses joined by story springs:

    floor n   ── m_n
                 │  story n (hysteresis)
    ...
    floor 1   ── m_1
                 │  story 1 (hysteresis)
    ground    ── fixed

One horizontal DOF per floor. The ground is registered in the keyed
assemblies as a 'fixed' key, so story 1 is written exactly like every other
story and the support is eliminated by the assembly itself.

At a trial distortion d (peak floor displacements relative to the ground)
the model returns the secant linear system:

    K(d)  story springs at secant stiffness k_eq(|d_i - d_(i-1)|)
    M     diagonal floor masses
    C(d)  stiffness-proportional at the first mode, with the damping ratio
          averaged over the stories by strain energy in the first mode shape

`ShearBuilding` instances are callables, so they can be passed directly as
the model of limit_strength_response:

    building = ShearBuilding(masses=[10.2, 20.4], stories=[wall_1, wall_2])
    d = limit_strength_response(building, np.zeros(2), acceleration_spectrum(4.8, 0.16, 0.64))
"""

from dataclasses import dataclass, field
from typing import Hashable, List, Sequence, Tuple

import numpy as np

from .elements import Spring
from .hysteresis import Hysteresis
from .kernel.assemble import compose
from .kernel.dof import FIXED, FREE, KeyedAssembly
from .kernel.modal import normal_modes, stiffness_proportional_damping, strain_energy_proportional_damping

GROUND = 'ground'


@dataclass
class ShearBuilding:
    """
    Lumped-mass shear building.

    Attributes:
    -----------
    masses : Sequence[float]
        Floor masses from the lowest floor up
    stories : Sequence[Hysteresis]
        Story hysteresis from the lowest story up; story i joins floor i to
        floor i-1 (the ground for i = 1)
    inherent_damping_ratio : float
        Viscous damping ratio added to every story's hysteretic ratio
    """
    masses: Sequence[float]
    stories: Sequence[Hysteresis]
    inherent_damping_ratio: float = 0.02
    springs: List[Spring] = field(init=False, repr=False)

    def __post_init__(self):
        self.masses = [float(m) for m in self.masses]
        self.stories = list(self.stories)
        if not self.masses:
            raise ValueError("a shear building needs at least one floor")
        if len(self.masses) != len(self.stories):
            raise ValueError(
                f"{len(self.masses)} floor masses but {len(self.stories)} stories were given"
            )
        for floor, mass in zip(self.floors, self.masses):
            if not mass > 0:
                raise ValueError(f"mass of floor {floor} must be positive, got {mass}")
        if self.inherent_damping_ratio < 0:
            raise ValueError(f"inherent damping ratio must be non-negative, got {self.inherent_damping_ratio}")
        self.springs = [Spring(story, np.eye(1)) for story in self.stories]

    @property
    def floors(self) -> List[int]:
        return list(range(1, len(self.masses) + 1))

    @property
    def degrees(self) -> int:
        return len(self.masses)

    def story_keys(self) -> List[Tuple[Hashable, Hashable]]:
        """(lower key, upper key) of every story, bottom up."""
        lower = [GROUND] + self.floors[:-1]
        return list(zip(lower, self.floors))

    def assembly(self, order: int) -> KeyedAssembly:
        """Empty assembly with the ground fixed and one free DOF per floor."""
        assembly = KeyedAssembly(order).put_key(GROUND, [FIXED])
        for floor in self.floors:
            assembly.put_key(floor, [FREE])
        return assembly

    def displacement(self, distortion) -> KeyedAssembly:
        """Order-1 assembly holding the floor displacements."""
        distortion = np.asarray(distortion, dtype=float)
        if distortion.shape != (self.degrees,):
            raise ValueError(f"distortion must have shape ({self.degrees},), got {distortion.shape}")
        displacement = self.assembly(1)
        displacement.put_assembled(distortion)
        return displacement

    def story_drifts(self, distortion) -> np.ndarray:
        displacement = self.displacement(distortion)
        return np.array([
            spring.distortion(keys, displacement)
            for spring, keys in zip(self.springs, self.story_keys())
        ])

    def mass(self) -> np.ndarray:
        """Diagonal mass matrix, rows ordered like the stiffness matrix."""
        assembly = self.assembly(2)
        ranges = {}
        for floor in self.floors:
            index = assembly.global_indices(floor)[0]
            ranges[floor] = range(index, index + 1)
        M, _ = compose(
            [([[np.array([[m]])]], [floor]) for floor, m in zip(self.floors, self.masses)],
            node_ranges=ranges,
        )
        return M

    def stiffness(self, distortion) -> np.ndarray:
        displacement = self.displacement(distortion)
        K = self.assembly(2)
        for spring, keys in zip(self.springs, self.story_keys()):
            spring.add_to(K, keys, displacement)
        return K.assembled()

    def damping_ratio(self, distortion, mode_shape) -> float:
        """Story damping ratios averaged by strain energy in `mode_shape`."""
        displacement = self.displacement(distortion)
        shape = self.displacement(mode_shape)
        terms = []
        for spring, keys in zip(self.springs, self.story_keys()):
            ke, x, ratio = spring.strain_energy_term(keys, displacement, shape)
            terms.append((ke, x, ratio + self.inherent_damping_ratio))
        return strain_energy_proportional_damping(terms)

    def __call__(self, distortion) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Secant (mass, damping, stiffness) at the trial distortion."""
        M = self.mass()
        K = self.stiffness(distortion)
        frequencies, modes = normal_modes(M, K)
        omega_1 = frequencies[0, 0]
        ratio = self.damping_ratio(distortion, modes[:, 0])
        C = stiffness_proportional_damping(K, omega_1, ratio)
        return M, C, K
