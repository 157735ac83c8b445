# mini_seismic/kernel/dof.py
"""
KEYED ASSEMBLY: Named Blocks with Boundary-Condition Elimination
================================================================

PURPOSE:
--------
This module maps named substructures (nodes, floors, elements) onto the rows
and columns of one dense system tensor. Each key registers a pattern of
'free' and 'fixed' degrees of freedom:

    floor_1: ['free', 'fixed', 'free']   → 2 rows in the system matrix
    ground:  ['fixed', 'fixed', 'fixed'] → 0 rows in the system matrix

Fixed degrees are never stored. Reading a block gives back the full local
size with zeros at the fixed positions, and writing a block silently drops
the fixed positions. Callers can therefore write element matrices in local
block terms and get a system matrix with the supports already eliminated.

USAGE:
------
    K = KeyedAssembly(order=2)
    K.put_key('ground', ['fixed'])
    K.put_key(1, ['free'])
    K.put_key(2, ['free'])

    K.put([1, 1], [[k1 + k2]])
    K.put([1, 2], [[-k2]])
    ...
    K.assembled()        # → 2×2 ndarray, ground already eliminated

The backing tensor has the same length N on every axis. Registering a key
grows it by the key's free count; deleting a key rebuilds a smaller tensor
from the surviving regions.
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Tuple

import numpy as np


class BoundaryConditionError(ValueError):
    """Raised when a degree tag is neither 'free' nor 'fixed'."""
    pass


class Degree(str, Enum):
    """Boundary condition of a single degree of freedom."""
    FREE = 'free'
    FIXED = 'fixed'


FREE = Degree.FREE
FIXED = Degree.FIXED


@dataclass
class KeyIndex:
    """
    Where a key's free degrees live in the backing tensor.

    Attributes:
    -----------
    offset : int or None
        First backing index used by the key. None when the key has no free
        degree (nothing is stored for it).
    free_ranges : List[range]
        Contiguous runs of free positions in local block coordinates.
    size : int
        Local block size (length of the registered degree pattern).
    """
    offset: Optional[int]
    free_ranges: List[range] = field(default_factory=list)
    size: int = 0

    @property
    def n_free(self) -> int:
        return sum(len(r) for r in self.free_ranges)


def _free_ranges(degrees: Iterable) -> Tuple[List[range], int]:
    """Run-length encode a degree pattern into local free ranges."""
    ranges = []
    start = None
    size = 0
    for position, tag in enumerate(degrees):
        try:
            degree = Degree(tag)
        except ValueError:
            raise BoundaryConditionError(
                f"expected boundary condition to be 'free' or 'fixed', got: {tag!r}"
            ) from None
        if degree is Degree.FREE and start is None:
            start = position
        elif degree is Degree.FIXED and start is not None:
            ranges.append(range(start, position))
            start = None
        size = position + 1
    if start is not None:
        ranges.append(range(start, size))
    return ranges, size


class KeyedAssembly:
    """
    Block tensor addressed by keys instead of integer indices.

    Every read returns a copy; the backing tensor is owned by the container.
    `put_key` and `delete_key` return the container itself so registrations
    can be chained.

    Parameters:
    -----------
    order : int
        Tensor rank: 2 for matrices (stiffness, mass), 1 for vectors
        (loads, displacements).

    Examples:
    ---------
    >>> K = KeyedAssembly(2).put_key('a', ['free', 'fixed', 'free'])
    >>> K.put(['a', 'a'], np.arange(9.0).reshape(3, 3))
    >>> K.assembled()
    array([[0., 2.],
           [6., 8.]])
    >>> K.get(['a', 'a'])
    array([[0., 0., 2.],
           [0., 0., 0.],
           [6., 0., 8.]])
    """

    def __init__(self, order: int):
        if int(order) < 1:
            raise ValueError(f"order must be a positive integer, got {order}")
        self._order = int(order)
        self._index: Dict[Hashable, KeyIndex] = {}
        self._tensor: Optional[np.ndarray] = None

    @property
    def order(self) -> int:
        return self._order

    @property
    def size(self) -> int:
        """Length N of every axis of the backing tensor (0 when nothing is stored)."""
        return 0 if self._tensor is None else self._tensor.shape[0]

    def keys(self) -> List[Hashable]:
        return list(self._index)

    def __contains__(self, key) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"KeyedAssembly(order={self._order}, keys={self.keys()!r}, size={self.size})"

    def copy(self) -> 'KeyedAssembly':
        other = KeyedAssembly(self._order)
        other._index = {
            key: KeyIndex(entry.offset, list(entry.free_ranges), entry.size)
            for key, entry in self._index.items()
        }
        other._tensor = None if self._tensor is None else self._tensor.copy()
        return other

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def put_key(self, key: Hashable, degrees: Sequence) -> 'KeyedAssembly':
        """
        Register `key` with a pattern of 'free'/'fixed' tags.

        A key that is already registered is deleted first, so its stored
        values are discarded. The key's free degrees are appended at the end
        of the backing tensor.

        Raises:
            BoundaryConditionError: If a tag is neither 'free' nor 'fixed'
        """
        free_ranges, size = _free_ranges(degrees)
        if key in self._index:
            self.delete_key(key)

        n_free = sum(len(r) for r in free_ranges)
        if n_free == 0:
            self._index[key] = KeyIndex(None, [], size)
            return self

        n = self.size
        grown = np.zeros((n + n_free,) * self._order)
        if self._tensor is not None:
            grown[(slice(0, n),) * self._order] = self._tensor
        self._tensor = grown
        self._index[key] = KeyIndex(n, free_ranges, size)
        return self

    def delete_key(self, key: Hashable) -> 'KeyedAssembly':
        """
        Remove a key and the rows/columns it occupied.

        Later keys shift down by the removed free count. Deleting an
        unregistered key does nothing.
        """
        entry = self._index.pop(key, None)
        if entry is None:
            return self
        if not self._index:
            self._tensor = None
            return self
        if entry.offset is None:
            return self

        start, removed = entry.offset, entry.n_free
        if all(other.offset is None for other in self._index.values()):
            self._tensor = None
            return self

        for other in self._index.values():
            if other.offset is not None and other.offset > start:
                other.offset -= removed

        n = self.size
        # Surviving regions: (old slice, new slice) before and after the removed run
        segments = [
            (slice(0, start), slice(0, start)),
            (slice(start + removed, n), slice(start, n - removed)),
        ]
        shrunk = np.zeros((n - removed,) * self._order)
        for combo in itertools.product(segments, repeat=self._order):
            old = tuple(s[0] for s in combo)
            new = tuple(s[1] for s in combo)
            shrunk[new] = self._tensor[old]
        self._tensor = shrunk
        return self

    def block_size(self, key: Hashable) -> int:
        return self._entry(key).size

    def global_indices(self, key: Hashable) -> List[int]:
        """Backing indices of the key's free degrees, in local order."""
        entry = self._entry(key)
        indices = []
        for local_slice, backing_slice in self._conversions(entry):
            indices.extend(range(backing_slice.start, backing_slice.stop))
        return indices

    # ------------------------------------------------------------------
    # Block access
    # ------------------------------------------------------------------

    def get(self, keys: Sequence[Hashable]) -> np.ndarray:
        """
        Read the block addressed by one key per axis.

        Returns a new array shaped by the keys' local sizes. Positions that
        are fixed on any axis read as zero.

        Raises:
            KeyError: If any key is not registered
            ValueError: If the number of keys differs from the order
        """
        entries = self._entries(keys)
        block = np.zeros(tuple(entry.size for entry in entries))
        if self._tensor is None:
            return block
        for local, backing in self._product(entries):
            block[local] = self._tensor[backing]
        return block

    def put(self, keys: Sequence[Hashable], value) -> None:
        """
        Write a block addressed by one key per axis.

        Only positions that are free on every axis are stored; the rest of
        `value` is dropped.
        """
        entries = self._entries(keys)
        value = np.asarray(value, dtype=float)
        expected = tuple(entry.size for entry in entries)
        if value.shape != expected:
            raise ValueError(
                f"block for keys {list(keys)!r} must have shape {expected}, got {value.shape}"
            )
        if self._tensor is None:
            return
        for local, backing in self._product(entries):
            self._tensor[backing] = value[local]

    def update(self, keys: Sequence[Hashable], fn: Callable[[np.ndarray], np.ndarray]) -> 'KeyedAssembly':
        """
        Replace a block by `fn(block)`.

        >>> K.update([1, 1], lambda block: block + ke)
        """
        self.put(keys, fn(self.get(keys)))
        return self

    def pop(self, keys: Sequence[Hashable]) -> np.ndarray:
        """Read a block and clear its stored values."""
        entries = self._entries(keys)
        block = self.get(keys)
        if self._tensor is not None:
            for _, backing in self._product(entries):
                self._tensor[backing] = 0.0
        return block

    # ------------------------------------------------------------------
    # Whole-tensor access
    # ------------------------------------------------------------------

    def assembled(self) -> Optional[np.ndarray]:
        """Copy of the backing tensor, or None when no key has a free degree."""
        return None if self._tensor is None else self._tensor.copy()

    def put_assembled(self, tensor) -> None:
        """Replace the backing tensor by one of identical shape."""
        tensor = np.asarray(tensor, dtype=float)
        if self._tensor is None:
            raise ValueError("assembly has no free degrees of freedom to replace")
        if tensor.shape != self._tensor.shape:
            raise ValueError(
                f"assembled tensor must have shape {self._tensor.shape}, got {tensor.shape}"
            )
        self._tensor = tensor.copy()

    def update_assembled(self, fn: Callable[[np.ndarray], np.ndarray]) -> 'KeyedAssembly':
        if self._tensor is None:
            raise ValueError("assembly has no free degrees of freedom to update")
        self.put_assembled(fn(self._tensor.copy()))
        return self

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _entry(self, key: Hashable) -> KeyIndex:
        try:
            return self._index[key]
        except KeyError:
            raise KeyError(f"key {key!r} is not registered") from None

    def _entries(self, keys: Sequence[Hashable]) -> List[KeyIndex]:
        keys = list(keys)
        if len(keys) != self._order:
            raise ValueError(
                f"expected {self._order} key(s) for an order-{self._order} assembly, got {len(keys)}"
            )
        return [self._entry(key) for key in keys]

    @staticmethod
    def _conversions(entry: KeyIndex) -> List[Tuple[slice, slice]]:
        """(local slice, backing slice) pairs for each free run of a key."""
        pairs = []
        offset = entry.offset
        for run in entry.free_ranges:
            pairs.append((slice(run.start, run.stop), slice(offset, offset + len(run))))
            offset += len(run)
        return pairs

    def _product(self, entries: List[KeyIndex]):
        per_axis = [self._conversions(entry) for entry in entries]
        for combo in itertools.product(*per_axis):
            yield tuple(pair[0] for pair in combo), tuple(pair[1] for pair in combo)
