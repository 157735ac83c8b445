# File: tests/test_keyed_assembly.py
"""
Tests for KeyedAssembly: key registration, boundary-condition elimination
and block read/write through local key coordinates.
"""

import numpy as np
import pytest

from mini_seismic.kernel.dof import FIXED, FREE, BoundaryConditionError, KeyedAssembly


def _block(first):
    """3x3 block holding first..first+8 row by row."""
    return np.arange(first, first + 9, dtype=float).reshape(3, 3)


def _five_keys():
    """
    Five keys with mixed patterns:

        a [f f f]   b [f f f]   c [f x f]   d [x x f]   e [f f f]

    Free counts 3 + 3 + 2 + 1 + 3 = 12, offsets 0, 3, 6, 8, 9.
    """
    return (
        KeyedAssembly(2)
        .put_key('a', ['free', 'free', 'free'])
        .put_key('b', ['free', 'free', 'free'])
        .put_key('c', ['free', 'fixed', 'free'])
        .put_key('d', ['fixed', 'fixed', 'free'])
        .put_key('e', ['free', 'free', 'free'])
    )


def _filled():
    K = _five_keys()
    K.put(['a', 'a'], _block(1))
    K.put(['b', 'b'], _block(11))
    K.put(['c', 'c'], _block(21))
    K.put(['d', 'd'], _block(31))
    K.put(['e', 'e'], _block(41))
    K.put(['d', 'b'], _block(51))
    K.put(['d', 'c'], _block(61))
    return K


def _expected_filled():
    expected = np.zeros((12, 12))
    expected[0:3, 0:3] = _block(1)
    expected[3:6, 3:6] = _block(11)
    expected[6, 6], expected[6, 7] = 21, 23
    expected[7, 6], expected[7, 7] = 27, 29
    expected[8, 3:6] = [57, 58, 59]
    expected[8, 6], expected[8, 7] = 67, 69
    expected[8, 8] = 39
    expected[9:12, 9:12] = _block(41)
    return expected


class TestRegistration:

    def test_new_assembly_is_empty(self):
        K = KeyedAssembly(2)
        assert K.order == 2
        assert K.size == 0
        assert len(K) == 0
        assert K.assembled() is None

    def test_order_must_be_positive(self):
        with pytest.raises(ValueError):
            KeyedAssembly(0)

    def test_put_key_grows_by_free_count(self):
        K = _five_keys()
        assert K.size == 12
        assert K.assembled().shape == (12, 12)
        assert K.keys() == ['a', 'b', 'c', 'd', 'e']

    def test_put_key_then_get_is_zero(self):
        K = KeyedAssembly(2).put_key('a', ['free', 'fixed', 'free', 'free'])
        np.testing.assert_array_equal(K.get(['a', 'a']), np.zeros((4, 4)))

    def test_degree_enum_and_strings_mix(self):
        K = KeyedAssembly(1).put_key('n', [FREE, 'fixed', FREE])
        assert K.global_indices('n') == [0, 1]
        assert K.block_size('n') == 3

    def test_invalid_boundary_condition(self):
        K = KeyedAssembly(2)
        with pytest.raises(BoundaryConditionError, match="'free' or 'fixed'"):
            K.put_key('a', ['free', 'pinned'])
        # A rejected pattern leaves the container untouched
        assert 'a' not in K
        assert K.size == 0

    def test_boundary_condition_error_is_value_error(self):
        with pytest.raises(ValueError):
            KeyedAssembly(1).put_key('a', [1])

    def test_global_indices_skip_fixed(self):
        K = _five_keys()
        assert K.global_indices('a') == [0, 1, 2]
        assert K.global_indices('c') == [6, 7]
        assert K.global_indices('d') == [8]
        assert K.global_indices('e') == [9, 10, 11]

    def test_reregistering_discards_values(self):
        K = _filled()
        K.put_key('a', ['free', 'free', 'free'])
        np.testing.assert_array_equal(K.get(['a', 'a']), np.zeros((3, 3)))
        assert K.size == 12
        # The key moved to the end of the backing tensor
        assert K.global_indices('a') == [9, 10, 11]

    def test_all_fixed_key_stores_nothing(self):
        K = KeyedAssembly(2).put_key('ground', [FIXED, FIXED, FIXED])
        assert K.assembled() is None
        np.testing.assert_array_equal(K.get(['ground', 'ground']), np.zeros((3, 3)))
        np.testing.assert_array_equal(K.pop(['ground', 'ground']), np.zeros((3, 3)))


class TestBlockAccess:

    def test_assembled_layout(self):
        np.testing.assert_array_equal(_filled().assembled(), _expected_filled())

    def test_get_reads_zero_at_fixed_positions(self):
        K = _filled()
        np.testing.assert_array_equal(K.get(['c', 'd']), np.zeros((3, 3)))

        expected = np.zeros((3, 3))
        expected[2, 0], expected[2, 2] = 67, 69
        np.testing.assert_array_equal(K.get(['d', 'c']), expected)

    def test_write_then_read_round_trip(self):
        """Free/free positions come back exactly; anything fixed reads zero."""
        K = _filled()
        value = np.arange(1.0, 10.0).reshape(3, 3) * 1.5
        K.put(['c', 'a'], value)
        expected = value.copy()
        expected[1, :] = 0.0
        np.testing.assert_array_equal(K.get(['c', 'a']), expected)

    def test_get_returns_copy(self):
        K = _filled()
        block = K.get(['a', 'a'])
        block[:] = 0.0
        np.testing.assert_array_equal(K.get(['a', 'a']), _block(1))

        assembled = K.assembled()
        assembled[:] = 0.0
        np.testing.assert_array_equal(K.assembled(), _expected_filled())

    def test_unknown_key(self):
        K = _filled()
        with pytest.raises(KeyError):
            K.get(['a', 'z'])
        with pytest.raises(KeyError):
            K.put(['z', 'a'], np.zeros((3, 3)))
        with pytest.raises(KeyError):
            K.pop(['z', 'z'])

    def test_wrong_number_of_keys(self):
        with pytest.raises(ValueError):
            _filled().get(['a'])

    def test_put_shape_mismatch(self):
        with pytest.raises(ValueError, match="must have shape"):
            _filled().put(['a', 'c'], np.zeros((3, 2)))

    def test_update(self):
        K = KeyedAssembly(2)
        for key, pattern in [('a', 'fff'), ('b', 'fff'), ('c', 'fxf'), ('d', 'xxf'), ('e', 'fff')]:
            K.put_key(key, ['free' if p == 'f' else 'fixed' for p in pattern])
        for keys, first in [('aa', 1), ('bb', 11), ('cc', 21), ('dd', 31), ('ee', 41), ('db', 51), ('dc', 61)]:
            K.update(list(keys), lambda block, first=first: block + _block(first))

        result = (
            K.update(['a', 'a'], lambda block: block * 2)
            .update(['d', 'b'], lambda block: -block)
            .assembled()
        )

        expected = _expected_filled()
        expected[0:3, 0:3] = _block(1) * 2
        expected[8, 3:6] = [-57, -58, -59]
        np.testing.assert_array_equal(result, expected)

    def test_pop_full_block(self):
        K = _filled()
        popped = K.pop(['b', 'b'])
        np.testing.assert_array_equal(popped, _block(11))

        expected = _expected_filled()
        expected[3:6, 3:6] = 0.0
        np.testing.assert_array_equal(K.assembled(), expected)

    def test_pop_with_fixed_degree(self):
        K = _five_keys()
        K.put(['a', 'a'], _block(1))
        K.put(['c', 'c'], _block(21))
        popped = K.pop(['c', 'c'])
        np.testing.assert_array_equal(popped, [[21, 0, 23], [0, 0, 0], [27, 0, 29]])

        expected = np.zeros((12, 12))
        expected[0:3, 0:3] = _block(1)
        np.testing.assert_array_equal(K.assembled(), expected)

    def test_get_before_any_write(self):
        np.testing.assert_array_equal(_five_keys().get(['a', 'a']), np.zeros((3, 3)))


class TestDeleteKey:

    def test_delete_middle_key_shifts_later_keys(self):
        K = (
            KeyedAssembly(2)
            .put_key('a', ['free', 'free', 'free'])
            .put_key('b', ['free', 'fixed', 'free'])
            .put_key('c', ['free', 'fixed', 'fixed'])
        )
        K.put(['a', 'a'], _block(1))
        K.put(['b', 'b'], _block(11))
        K.put(['c', 'c'], _block(21))

        K.delete_key('b')

        expected = np.zeros((4, 4))
        expected[0:3, 0:3] = _block(1)
        expected[3, 3] = 21
        np.testing.assert_array_equal(K.assembled(), expected)
        assert K.global_indices('c') == [3]
        with pytest.raises(KeyError):
            K.get(['c', 'b'])

    def test_delete_keeps_cross_blocks(self):
        K = _filled()
        K.delete_key('c')
        assert K.size == 10
        expected = np.zeros((3, 3))
        expected[2, :] = [57, 58, 59]
        np.testing.assert_array_equal(K.get(['d', 'b']), expected)
        np.testing.assert_array_equal(K.get(['e', 'e']), _block(41))

    def test_delete_first_key(self):
        K = (
            KeyedAssembly(2)
            .put_key('a', ['free', 'free', 'free'])
            .put_key('b', ['free', 'fixed', 'free'])
            .delete_key('a')
        )
        np.testing.assert_array_equal(K.assembled(), np.zeros((2, 2)))
        with pytest.raises(KeyError):
            K.get(['a', 'b'])

    def test_delete_last_key(self):
        K = (
            KeyedAssembly(2)
            .put_key('a', ['free', 'free', 'free'])
            .put_key('b', ['free', 'fixed', 'free'])
            .delete_key('b')
        )
        np.testing.assert_array_equal(K.assembled(), np.zeros((3, 3)))

    def test_delete_only_key_resets(self):
        K = KeyedAssembly(2).put_key('a', ['free', 'free', 'free']).delete_key('a')
        assert K.assembled() is None
        assert len(K) == 0
        assert K.order == 2

    def test_delete_leaving_only_fixed_keys(self):
        K = (
            KeyedAssembly(2)
            .put_key('a', ['fixed', 'fixed', 'fixed'])
            .put_key('b', ['free', 'free', 'fixed'])
            .delete_key('b')
        )
        assert K.assembled() is None
        np.testing.assert_array_equal(K.get(['a', 'a']), np.zeros((3, 3)))

    def test_delete_fixed_key_keeps_storage(self):
        K = (
            KeyedAssembly(2)
            .put_key('a', ['fixed', 'fixed', 'fixed'])
            .put_key('b', ['free', 'free', 'fixed'])
            .delete_key('a')
        )
        np.testing.assert_array_equal(K.assembled(), np.zeros((2, 2)))
        np.testing.assert_array_equal(K.get(['b', 'b']), np.zeros((3, 3)))

    def test_delete_unknown_key_is_noop(self):
        K = _filled()
        K.delete_key('z')
        np.testing.assert_array_equal(K.assembled(), _expected_filled())

    def test_delete_then_put_same_pattern(self):
        K = _filled()
        shape = K.assembled().shape
        K.delete_key('c').put_key('c', ['free', 'fixed', 'free'])
        assert K.assembled().shape == shape
        np.testing.assert_array_equal(K.get(['c', 'c']), np.zeros((3, 3)))
        np.testing.assert_array_equal(K.get(['a', 'a']), _block(1))


class TestWholeTensor:

    def test_put_assembled(self):
        K = KeyedAssembly(1).put_key('ground', ['fixed']).put_key(1, ['free']).put_key(2, ['free'])
        K.put_assembled([0.1, 0.3])
        np.testing.assert_array_equal(K.get([2]), [0.3])
        np.testing.assert_array_equal(K.get(['ground']), [0.0])

    def test_put_assembled_shape_mismatch(self):
        K = KeyedAssembly(1).put_key(1, ['free'])
        with pytest.raises(ValueError):
            K.put_assembled([0.1, 0.2])

    def test_put_assembled_without_storage(self):
        K = KeyedAssembly(1).put_key('ground', ['fixed'])
        with pytest.raises(ValueError):
            K.put_assembled([])

    def test_update_assembled(self):
        K = _filled()
        K.update_assembled(lambda tensor: tensor.T)
        np.testing.assert_array_equal(K.assembled(), _expected_filled().T)

    def test_copy_is_independent(self):
        K = _filled()
        other = K.copy()
        other.put(['a', 'a'], np.zeros((3, 3)))
        other.delete_key('e')
        np.testing.assert_array_equal(K.get(['a', 'a']), _block(1))
        assert 'e' in K
        assert K.size == 12
