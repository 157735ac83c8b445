# File: tests/test_hysteresis.py
"""
Tests for secant stiffness and equivalent damping of hysteresis models.
"""

import math

import numpy as np
import pytest

from mini_seismic.hysteresis import (
    Hysteresis,
    LinearHysteresis,
    PeakOrientedHysteresis,
    equivalent_damping_ratio,
    equivalent_stiffness,
)


def test_equivalent_stiffness_is_secant():
    assert np.isclose(equivalent_stiffness(0.01, lambda x: 120 * x), 120.0)
    assert np.isclose(equivalent_stiffness(0.1, lambda x: 15), 150.0)


def test_equivalent_stiffness_undefined_at_zero():
    with pytest.raises(ValueError):
        equivalent_stiffness(0.0, lambda x: 120 * x)


def test_peak_oriented_damping_ratio():
    skeleton = lambda x: 12
    assert np.isclose(equivalent_damping_ratio(0.1, skeleton), 0.15915494309189535)
    assert equivalent_damping_ratio(0.1, skeleton, unloading_stiffness=120) == 0.0
    assert np.isclose(equivalent_damping_ratio(0.1, skeleton, unloading_stiffness=150), 0.03183098861837906)
    assert equivalent_damping_ratio(0.1, skeleton, unloading_stiffness=100) == 0.0


def test_unknown_rule():
    with pytest.raises(ValueError):
        equivalent_damping_ratio(0.1, lambda x: 12, rule='bilinear')


class TestLinearHysteresis:

    def test_constant_stiffness(self):
        spring = LinearHysteresis(120900.8)
        assert spring.equivalent_stiffness(0.012) == 120900.8
        assert spring.equivalent_stiffness(0.0) == 120900.8
        assert spring.equivalent_damping_ratio(0.08) == 0.0
        assert np.isclose(spring.skeleton(0.01), 1209.008)

    def test_negative_constant(self):
        with pytest.raises(ValueError):
            LinearHysteresis(-1.0)

    def test_is_a_hysteresis(self):
        assert isinstance(LinearHysteresis(1.0), Hysteresis)


class TestPeakOrientedHysteresis:

    def test_initial_stiffness_at_zero(self):
        wall = PeakOrientedHysteresis(lambda x: 15.0 * np.tanh(x / 0.01), initial_stiffness=1500.0)
        assert wall.equivalent_stiffness(0.0) == 1500.0

    def test_secant_and_damping(self):
        wall = PeakOrientedHysteresis(lambda x: 12.0, initial_stiffness=200.0, unloading_stiffness=150.0)
        assert np.isclose(wall.equivalent_stiffness(0.1), 120.0)
        assert np.isclose(wall.equivalent_damping_ratio(0.1), 0.03183098861837906)

    def test_damping_grows_as_secant_softens(self):
        skeleton = lambda x: 15.0 * np.tanh(x / 0.01)
        wall = PeakOrientedHysteresis(skeleton, initial_stiffness=1500.0, unloading_stiffness=1500.0)
        ratios = [wall.equivalent_damping_ratio(x) for x in (0.002, 0.01, 0.05)]
        assert ratios[0] < ratios[1] < ratios[2] < 0.5 / math.pi

    def test_without_unloading_stiffness(self):
        wall = PeakOrientedHysteresis(lambda x: 12.0, initial_stiffness=200.0)
        assert np.isclose(wall.equivalent_damping_ratio(0.3), 0.5 / math.pi)

    def test_damping_matches_module_rule(self):
        skeleton = lambda x: 15.0 * np.tanh(x / 0.01)
        wall = PeakOrientedHysteresis(skeleton, initial_stiffness=1500.0, unloading_stiffness=1200.0)
        for x in (0.002, 0.01, 0.05):
            assert wall.equivalent_damping_ratio(x) == equivalent_damping_ratio(x, skeleton, unloading_stiffness=1200.0)

    def test_damping_at_rest_uses_initial_stiffness(self):
        wall = PeakOrientedHysteresis(lambda x: 12.0, initial_stiffness=100.0, unloading_stiffness=150.0)
        assert np.isclose(wall.equivalent_damping_ratio(0.0), (0.5 - 0.5 * 100.0 / 150.0) / math.pi)
        stiff = PeakOrientedHysteresis(lambda x: 12.0, initial_stiffness=200.0, unloading_stiffness=150.0)
        assert stiff.equivalent_damping_ratio(0.0) == 0.0

    def test_invalid_stiffness(self):
        with pytest.raises(ValueError):
            PeakOrientedHysteresis(lambda x: x, initial_stiffness=0.0)
        with pytest.raises(ValueError):
            PeakOrientedHysteresis(lambda x: x, initial_stiffness=1.0, unloading_stiffness=-5.0)
