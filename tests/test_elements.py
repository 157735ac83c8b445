# File: tests/test_elements.py
"""
Tests for the two-node hysteretic spring and its scatter into a
KeyedAssembly.
"""

import numpy as np
import pytest

from mini_seismic.elements import Spring
from mini_seismic.hysteresis import LinearHysteresis, PeakOrientedHysteresis
from mini_seismic.kernel.dof import KeyedAssembly


FREE3 = ['free', 'free', 'free']


def _displacement(**values):
    u = KeyedAssembly(1)
    for key, value in values.items():
        u.put_key(key, FREE3)
        u.put([key], value)
    return u


def test_element_blocks():
    spring = Spring(LinearHysteresis(33.1), np.diag([1.0, 0.0, 0.0]))
    u = _displacement(a=[0.0, 0.0, 0.0], b=[0.01, 0.0, 0.0])

    blocks = dict(spring.equivalent_stiffness(['a', 'b'], u))
    P = np.diag([33.1, 0.0, 0.0])
    np.testing.assert_allclose(blocks[('a', 'a')], P)
    np.testing.assert_allclose(blocks[('a', 'b')], -P)
    np.testing.assert_allclose(blocks[('b', 'a')], -P)
    np.testing.assert_allclose(blocks[('b', 'b')], P)


def test_add_to_assembly():
    """
    WHAT IS THIS TEST?
    ==================
    An x-direction spring between two 3-DOF nodes only couples the two x
    rows: K[0,0] = K[3,3] = k, K[0,3] = K[3,0] = -k, everything else zero.
    """
    spring = Spring(LinearHysteresis(33.1), np.diag([1.0, 0.0, 0.0]))
    u = _displacement(a=[0.0, 0.0, 0.0], b=[0.01, 0.0, 0.0])
    K = KeyedAssembly(2).put_key('a', FREE3).put_key('b', FREE3)

    spring.add_to(K, ['a', 'b'], u)

    expected = np.zeros((6, 6))
    expected[0, 0] = expected[3, 3] = 33.1
    expected[0, 3] = expected[3, 0] = -33.1
    np.testing.assert_allclose(K.assembled(), expected)


def test_springs_in_parallel_accumulate():
    u = _displacement(a=[0.0, 0.0, 0.0], b=[0.0, 0.0, 0.0])
    K = KeyedAssembly(2).put_key('a', FREE3).put_key('b', FREE3)
    Spring(LinearHysteresis(10.0), np.diag([1.0, 0.0, 0.0])).add_to(K, ['a', 'b'], u)
    Spring(LinearHysteresis(4.0), np.diag([1.0, 0.0, 0.0])).add_to(K, ['a', 'b'], u)
    assert np.isclose(K.assembled()[0, 0], 14.0)


def test_fixed_end_is_eliminated():
    spring = Spring(LinearHysteresis(33.1), np.diag([1.0, 0.0, 0.0]))
    u = KeyedAssembly(1).put_key('ground', ['fixed'] * 3).put_key('a', FREE3)
    K = KeyedAssembly(2).put_key('ground', ['fixed'] * 3).put_key('a', FREE3)

    spring.add_to(K, ['ground', 'a'], u)

    expected = np.zeros((3, 3))
    expected[0, 0] = 33.1
    np.testing.assert_allclose(K.assembled(), expected)


def test_distortion_follows_transformation():
    spring = Spring.along(LinearHysteresis(1.0), [1.0, 1.0, 0.0])
    np.testing.assert_allclose(spring.transformation, 0.5 * np.array([[1, 1, 0], [1, 1, 0], [0, 0, 0]]))

    u = _displacement(a=[0.0, 0.0, 0.0], b=[1.0, 0.0, 0.0])
    np.testing.assert_allclose(spring.element_distortion(['a', 'b'], u), [0.5, 0.5, 0.0])
    assert np.isclose(spring.distortion(['a', 'b'], u), np.sqrt(0.5))


def test_secant_stiffness_uses_distortion():
    wall = PeakOrientedHysteresis(lambda x: 12.0, initial_stiffness=200.0, unloading_stiffness=150.0)
    spring = Spring(wall, np.eye(1))
    u = KeyedAssembly(1).put_key(1, ['free']).put_key(2, ['free'])
    u.put_assembled([0.05, 0.15])

    np.testing.assert_allclose(spring.partial_stiffness([1, 2], u), [[120.0]])
    assert np.isclose(spring.equivalent_damping_ratio([1, 2], u), 0.03183098861837906)


def test_strain_energy_term():
    spring = Spring(LinearHysteresis(5.0), np.eye(1))
    u = KeyedAssembly(1).put_key('ground', ['fixed']).put_key(1, ['free'])
    shape = KeyedAssembly(1).put_key('ground', ['fixed']).put_key(1, ['free'])
    shape.put_assembled([2.0])

    ke, x, ratio = spring.strain_energy_term(['ground', 1], u, shape)
    np.testing.assert_allclose(ke, [[5.0, -5.0], [-5.0, 5.0]])
    np.testing.assert_allclose(x, [0.0, 2.0])
    assert ratio == 0.0


def test_invalid_construction():
    with pytest.raises(ValueError):
        Spring(LinearHysteresis(1.0), np.ones((2, 3)))
    with pytest.raises(ValueError):
        Spring.along(LinearHysteresis(1.0), [0.0, 0.0])


def test_keys_and_assembly_order():
    spring = Spring(LinearHysteresis(1.0), np.eye(3))
    u = _displacement(a=[0.0, 0.0, 0.0], b=[0.0, 0.0, 0.0], c=[0.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        spring.distortion(['a', 'b', 'c'], u)

    K = KeyedAssembly(2).put_key('a', FREE3).put_key('b', FREE3)
    with pytest.raises(ValueError):
        spring.distortion(['a', 'b'], K)


def test_block_size_must_match_transformation():
    spring = Spring(LinearHysteresis(1.0), np.eye(2))
    u = _displacement(a=[0.0, 0.0, 0.0], b=[0.0, 0.0, 0.0])
    with pytest.raises(ValueError):
        spring.distortion(['a', 'b'], u)
