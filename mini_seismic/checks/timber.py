# mini_seismic/checks/timber.py
"""
Rigidity of inserted wooden siding walls (板壁).

Horizontal boards slid into grooves of the columns and joined with dowels
(shear connectors). The wall flexibility is the sum of five inverted
rigidities, after the model of Architectural Institute of Japan, J. Struct.
Constr. Eng. 76 (659), 97-105 (2011). Consistent units throughout (the
reference values use cm and kN).
"""

import math
from dataclasses import dataclass


def _check_positive(**values: float) -> None:
    for name, value in values.items():
        if not value > 0:
            raise ValueError(f"{name} must be positive, got {value}")


def _check_non_negative(**values: float) -> None:
    for name, value in values.items():
        if not value >= 0:
            raise ValueError(f"{name} must be non-negative, got {value}")


def _check_count(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ValueError(f"{name} must be a positive integer, got {value!r}")


def _check_width(width: float, thickness: float) -> None:
    if width < thickness:
        raise ValueError(f"member width {width} must not be smaller than siding thickness {thickness}")


def first_slip_deformation_angle(
    inner_width: float,
    inner_height: float,
    horizontal_clearance: float,
    vertical_clearance: float
) -> float:
    """
    Drift angle R0 taken up by clearances before the boards bear.

    R0 = ((l - cl/2)·cl + (h - ch/2)·ch) / (l·h)
    """
    _check_positive(inner_width=inner_width, inner_height=inner_height)
    _check_non_negative(horizontal_clearance=horizontal_clearance, vertical_clearance=vertical_clearance)
    l, h = inner_width, inner_height
    cl, ch = horizontal_clearance, vertical_clearance
    return ((l - cl * 0.5) * cl + (h - ch * 0.5) * ch) / (l * h)


def shear_connector_inverted_rigidity(
    connector_rigidity: float,
    connectors_per_row: int,
    siding_width: float,
    inner_height: float,
    inner_width: float,
    friction_coefficient: float = 0.0
) -> float:
    """
    1/Kd, slip of the dowels between boards, reduced by board friction.

    Zero once friction alone locks the joints (h·μ/l >= 1).
    """
    _check_positive(
        connector_rigidity=connector_rigidity, siding_width=siding_width,
        inner_height=inner_height, inner_width=inner_width
    )
    _check_count("connectors_per_row", connectors_per_row)
    _check_non_negative(friction_coefficient=friction_coefficient)

    h, l, fc = inner_height, inner_width, friction_coefficient
    if h * fc / l >= 1:
        return 0.0
    joints = math.floor(h / siding_width) - 1
    return joints * (1 / h - fc / l) / connectors_per_row / connector_rigidity


def siding_inverted_rigidity(shear_modulus: float, thickness: float, inner_width: float) -> float:
    """1/Ks, shear deformation of the boards: 1 / (G·l·t)."""
    _check_positive(shear_modulus=shear_modulus, thickness=thickness, inner_width=inner_width)
    return 1 / shear_modulus / inner_width / thickness


def diagonal_siding_zone_inverted_rigidity(
    fiber_elasticity: float,
    elasticity_ratio: float,
    thickness: float,
    inner_width: float,
    inner_height: float
) -> float:
    """
    1/Ka, shortening of the diagonal compression zone of the boards.

    Args:
        fiber_elasticity: Young's modulus along the grain E‖
        elasticity_ratio: E‖ / E┴
    """
    _check_positive(
        fiber_elasticity=fiber_elasticity, elasticity_ratio=elasticity_ratio,
        thickness=thickness, inner_width=inner_width, inner_height=inner_height
    )
    l, h = inner_width, inner_height
    return (
        (4 * math.log(l) - math.log(l * l + h * h) + h * h / l / l - 1)
        * (l * l + h * h * elasticity_ratio) / (l * l + h * h)
        / fiber_elasticity / l / thickness
    )


def dent_coefficient(depth: float, width: float, thickness: float, substitution_coefficient: float) -> float:
    """
    Increase of embedment stiffness from the wood around the loaded zone.

    1 + 4/3 · d · (1 - exp(-3/4 · n · (b - t) / d)) / (n · t)
    """
    _check_positive(
        depth=depth, width=width, thickness=thickness,
        substitution_coefficient=substitution_coefficient
    )
    n = substitution_coefficient
    return 1 + 4 / 3 * depth * (1 - math.exp(-3 / 4 * n * (width - thickness) / depth)) / n / thickness


def column_side_inverted_rigidity(
    orthogonal_elasticity: float,
    column_depth: float,
    column_width: float,
    substitution_coefficient: float,
    thickness: float,
    siding_width: float,
    inner_height: float
) -> float:
    """1/Kc, embedment of the board ends into the columns."""
    _check_positive(
        orthogonal_elasticity=orthogonal_elasticity, column_depth=column_depth,
        siding_width=siding_width, inner_height=inner_height
    )
    _check_width(column_width, thickness)
    dent = dent_coefficient(column_depth, column_width, thickness, substitution_coefficient)
    return 4 * column_depth / siding_width / inner_height / thickness / dent / orthogonal_elasticity


def column_side_inverted_rigidity_with_shear_connectors(
    orthogonal_elasticity: float,
    column_depth: float,
    column_width: float,
    substitution_coefficient: float,
    thickness: float,
    siding_width: float,
    inner_height: float,
    inner_width: float,
    connectors_per_row: int,
    connector_rigidity: float,
    friction_coefficient: float = 0.0
) -> float:
    """1/Kc when the boards are also doweled to the beams."""
    _check_positive(
        orthogonal_elasticity=orthogonal_elasticity, column_depth=column_depth,
        siding_width=siding_width, inner_height=inner_height, inner_width=inner_width,
        connector_rigidity=connector_rigidity
    )
    _check_width(column_width, thickness)
    _check_count("connectors_per_row", connectors_per_row)
    _check_non_negative(friction_coefficient=friction_coefficient)

    dc, h = column_depth, inner_height
    dent = dent_coefficient(dc, column_width, thickness, substitution_coefficient)
    return (
        4 * dc / h
        / (siding_width * thickness * dent * orthogonal_elasticity + 2 * dc * connectors_per_row * connector_rigidity)
        * (1 - h / inner_width * friction_coefficient)
    )


def beam_side_inverted_rigidity(
    orthogonal_elasticity: float,
    beam_height: float,
    beam_width: float,
    substitution_coefficient: float,
    thickness: float,
    inner_width: float,
    inner_height: float
) -> float:
    """1/Kb, embedment of the top and bottom boards into the beams."""
    _check_positive(
        orthogonal_elasticity=orthogonal_elasticity, beam_height=beam_height,
        inner_width=inner_width, inner_height=inner_height
    )
    _check_width(beam_width, thickness)
    l = inner_width
    dent = dent_coefficient(beam_height, beam_width, thickness, substitution_coefficient)
    return 108 / 7 * inner_height * beam_height / l / l / l / thickness / dent / orthogonal_elasticity


@dataclass(frozen=True)
class InsertedSidingWall:
    """
    Geometry and material of one inserted wooden siding wall.

    Attributes:
        connector_rigidity: Shear rigidity of one dowel
        connectors_per_row: Dowels per board joint
        siding_width: Board width
        inner_height: Clear height of the frame
        inner_width: Clear width of the frame
        friction_coefficient: Friction between boards
        shear_modulus: Shear modulus of the boards
        thickness: Board thickness
        fiber_elasticity: Board Young's modulus along the grain
        elasticity_ratio: E‖ / E┴ of the boards
        column_orthogonal_elasticity: Column modulus across the grain
        beam_orthogonal_elasticity: Beam modulus across the grain
        column_depth, column_width: Column section
        beam_height, beam_width: Beam section
        column_substitution_coefficient, beam_substitution_coefficient:
            Fibre substitution coefficients of the frame timber
        connectors_to_beams: Boards are also doweled to the beams
    """
    connector_rigidity: float
    connectors_per_row: int
    siding_width: float
    inner_height: float
    inner_width: float
    friction_coefficient: float
    shear_modulus: float
    thickness: float
    fiber_elasticity: float
    elasticity_ratio: float
    column_orthogonal_elasticity: float
    beam_orthogonal_elasticity: float
    column_depth: float
    beam_height: float
    column_width: float
    beam_width: float
    column_substitution_coefficient: float
    beam_substitution_coefficient: float
    connectors_to_beams: bool = False

    def column_side_inverted_rigidity(self) -> float:
        if self.connectors_to_beams:
            return column_side_inverted_rigidity_with_shear_connectors(
                self.column_orthogonal_elasticity, self.column_depth, self.column_width,
                self.column_substitution_coefficient, self.thickness, self.siding_width,
                self.inner_height, self.inner_width, self.connectors_per_row,
                self.connector_rigidity, self.friction_coefficient,
            )
        return column_side_inverted_rigidity(
            self.column_orthogonal_elasticity, self.column_depth, self.column_width,
            self.column_substitution_coefficient, self.thickness, self.siding_width,
            self.inner_height,
        )

    def inverted_rigidity(self) -> float:
        """1/K = 1/Kd + 1/Ks + 1/Ka + 1/Kc + 1/Kb."""
        return (
            shear_connector_inverted_rigidity(
                self.connector_rigidity, self.connectors_per_row, self.siding_width,
                self.inner_height, self.inner_width, self.friction_coefficient,
            )
            + siding_inverted_rigidity(self.shear_modulus, self.thickness, self.inner_width)
            + diagonal_siding_zone_inverted_rigidity(
                self.fiber_elasticity, self.elasticity_ratio, self.thickness,
                self.inner_width, self.inner_height,
            )
            + self.column_side_inverted_rigidity()
            + beam_side_inverted_rigidity(
                self.beam_orthogonal_elasticity, self.beam_height, self.beam_width,
                self.beam_substitution_coefficient, self.thickness, self.inner_width,
                self.inner_height,
            )
        )

    def rigidity(self) -> float:
        return 1 / self.inverted_rigidity()
