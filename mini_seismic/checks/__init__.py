# mini_seismic/checks - Empirical wall models
"""Stiffness and skeleton curves of traditional wooden wall types."""

from .mud_plaster import (
    mud_plaster_wall_skeleton,
    mud_plaster_wall_initial_stiffness,
    mud_plaster_wall,
)

from .timber import (
    InsertedSidingWall,
    first_slip_deformation_angle,
    shear_connector_inverted_rigidity,
    siding_inverted_rigidity,
    diagonal_siding_zone_inverted_rigidity,
    dent_coefficient,
    column_side_inverted_rigidity,
    column_side_inverted_rigidity_with_shear_connectors,
    beam_side_inverted_rigidity,
)

__all__ = [
    # Mud plaster wall
    'mud_plaster_wall_skeleton',
    'mud_plaster_wall_initial_stiffness',
    'mud_plaster_wall',
    # Inserted wooden siding wall
    'InsertedSidingWall',
    'first_slip_deformation_angle',
    'shear_connector_inverted_rigidity',
    'siding_inverted_rigidity',
    'diagonal_siding_zone_inverted_rigidity',
    'dent_coefficient',
    'column_side_inverted_rigidity',
    'column_side_inverted_rigidity_with_shear_connectors',
    'beam_side_inverted_rigidity',
]
