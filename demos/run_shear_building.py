# File: demos/run_shear_building.py
"""
DEMO: TWO-STORY WOODEN BUILDING WITH MUD PLASTER WALLS
======================================================

PURPOSE:
--------
This demo estimates the peak seismic response of a small traditional wooden
building by equivalent linearization:

- Each story resists with mud plaster walls (nonlinear, softening)
- The floors are lumped masses (shear building idealisation)
- The earthquake is a damping-dependent acceleration response spectrum

PHYSICAL PROBLEM:
-----------------
Mud plaster walls are stiff at small drift and soften as the plaster cracks.
A linear analysis with the initial stiffness would underestimate the drift,
while the cracked walls also dissipate energy (hysteretic damping). The
equivalent-linear method finds the drift at which the secant stiffness and
damping of the walls reproduce the drift they were computed from:

    d → (M, C(d), K(d)) → response spectrum analysis → d_new
    repeat until d_new ≈ d
"""

import logging

import numpy as np

from mini_seismic import CONFIG, ConvergenceError, STANDARD_GRAVITY, ShearBuilding, limit_strength_response
from mini_seismic.checks import InsertedSidingWall, mud_plaster_wall
from mini_seismic.hysteresis import PeakOrientedHysteresis
from mini_seismic.kernel.modal import modal_analysis
from mini_seismic.loads import acceleration_spectrum, spectrum_table


def print_header(title):
    print("=" * 70)
    print(title)
    print("=" * 70)
    print()


def main():
    """
    STEP 1: Define walls, masses and the design spectrum
    STEP 2: Modal properties at rest (initial stiffness)
    STEP 3: Equivalent-linear iteration
    STEP 4: Compare with a wooden siding wall
    """
    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s: %(message)s")

    print_header("DEMO: TWO-STORY WOODEN BUILDING WITH MUD PLASTER WALLS")

    # ========================================================================
    # STEP 1: DEFINE THE BUILDING
    # ========================================================================
    story_height = 2.1     # Structural height H (m)
    panel_height = 1.8     # Clear panel height (m)
    panel_width = 1.98     # Clear panel width (m)
    plaster = 0.06         # Plaster thickness (m)

    walls_per_story = [6, 4]
    masses = [4000.0, 3000.0]   # Floor masses (kg), lowest floor first

    # Each story behaves like walls_per_story identical walls in parallel
    stories = []
    for count in walls_per_story:
        wall = mud_plaster_wall(story_height, panel_height, panel_width, plaster)
        stories.append(_parallel(wall, count))

    peak = 0.5 * STANDARD_GRAVITY
    spectrum = acceleration_spectrum(peak, 0.16, 0.64)

    print("STEP 1: Building and Spectrum")
    print("-" * 70)
    for number, (count, mass) in enumerate(zip(walls_per_story, masses), start=1):
        print(f"  Story {number}: {count} walls, floor mass {mass:.0f} kg")
    print(f"  Plateau acceleration: {peak:.2f} m/s² (0.5 g)")
    periods = np.array([0.05, 0.16, 0.3, 0.64, 1.0, 2.0])
    for T, Sa in zip(periods, spectrum_table(spectrum, periods)):
        print(f"    T = {T:4.2f} s   Sa(h=5%) = {Sa:5.2f} m/s²")
    print()

    # ========================================================================
    # STEP 2: MODAL PROPERTIES AT REST
    # ========================================================================
    building = ShearBuilding(masses=masses, stories=stories)
    M, C, K = building(np.zeros(building.degrees))

    print("STEP 2: Modal Properties at Initial Stiffness")
    print("-" * 70)
    print(modal_analysis(M, K, damping=C).to_frame().to_string(index=False, float_format="%.4f"))
    print()

    # ========================================================================
    # STEP 3: EQUIVALENT-LINEAR ITERATION
    # ========================================================================
    print("STEP 3: Equivalent Linearization")
    print("-" * 70)
    try:
        d = limit_strength_response(
            building, np.zeros(building.degrees), spectrum,
            method=CONFIG.superposition, relative_tolerance=1e-9, max_iterations=500,
        )
    except ConvergenceError as e:
        print(f"  Did not converge: {e}")
        return

    drifts = building.story_drifts(d)
    for number, drift in enumerate(drifts, start=1):
        print(f"  Story {number}: drift {drift * 1000:.2f} mm  (1/{story_height / drift:.0f} rad)")

    M, C, K = building(d)
    print()
    print(modal_analysis(M, K, damping=C).to_frame().to_string(index=False, float_format="%.4f"))
    print()

    # ========================================================================
    # STEP 4: WOODEN SIDING WALL FOR COMPARISON
    # ========================================================================
    siding = InsertedSidingWall(
        connector_rigidity=11, connectors_per_row=5, siding_width=13.5,
        inner_height=270, inner_width=174.5, friction_coefficient=0,
        shear_modulus=45.73, thickness=2.7, fiber_elasticity=686, elasticity_ratio=50,
        column_orthogonal_elasticity=13.72, beam_orthogonal_elasticity=13.72,
        column_depth=10.5, beam_height=10.5, column_width=10.5, beam_width=10.5,
        column_substitution_coefficient=5, beam_substitution_coefficient=5,
    )
    mud = mud_plaster_wall(story_height, panel_height, panel_width, plaster)

    print("STEP 4: Wall Rigidity Comparison")
    print("-" * 70)
    # kN/cm → N/m
    print(f"  Wooden siding wall: {siding.rigidity() * 1e5:,.0f} N/m")
    print(f"  Mud plaster wall:   {mud.initial_stiffness:,.0f} N/m (initial)")
    print()


def _parallel(wall, count):
    """`count` identical walls acting together."""
    return PeakOrientedHysteresis(
        skeleton_curve=lambda x: count * wall.skeleton(x),
        initial_stiffness=count * wall.initial_stiffness,
        unloading_stiffness=count * wall.unloading_stiffness,
    )


if __name__ == "__main__":
    main()
