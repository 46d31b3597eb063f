"""Disjoint-set (union-find) store over a flat array of cells.

Every cell is an index into `cells`. A negative entry marks a root and holds
the size of its set as `-size`; a non-negative entry is the parent index.

    ds = DisjointSet(4)
    ds.union(ds.find(0), ds.find(1))
    ds.set_count  # 3
"""

from typing import List


class DisjointSet:
    """Union-by-size disjoint set with optional path compression."""

    cells: List[int]
    path_compression: bool
    set_count: int

    def __init__(self, size: int, *, path_compression: bool = False) -> None:
        if size <= 0:
            raise ValueError(f"Disjoint set needs at least one cell, got {size}")
        self.cells = [-1] * size
        self.path_compression = path_compression
        self.set_count = size

    def __len__(self) -> int:
        return len(self.cells)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.cells):
            raise IndexError(
                f"Cell index {index} out of range (0..{len(self.cells) - 1})"
            )

    def is_root(self, index: int) -> bool:
        self._check_index(index)
        return self.cells[index] < 0

    def find(self, target: int) -> int:
        """Return the root index of the set containing `target`.

        With path compression enabled, every cell on the walked chain is
        re-parented directly to the root. Root sizes are left untouched.
        """

        self._check_index(target)
        root = target
        while self.cells[root] >= 0:
            root = self.cells[root]

        if self.path_compression:
            while self.cells[target] >= 0:
                parent = self.cells[target]
                self.cells[target] = root
                target = parent

        return root

    def union(self, root1: int, root2: int) -> int:
        """Merge two distinct roots by size and return the absorbing root.

        The larger set (more negative entry) absorbs the other; on a tie
        `root2` absorbs `root1`.
        """

        if not (self.is_root(root1) and self.is_root(root2)):
            raise ValueError(f"union() expects two roots, got {root1} and {root2}")
        if root1 == root2:
            raise ValueError(f"Cannot union root {root1} with itself")

        if self.cells[root1] < self.cells[root2]:
            keep, absorbed = root1, root2
        else:
            keep, absorbed = root2, root1
        self.cells[keep] += self.cells[absorbed]
        self.cells[absorbed] = keep
        self.set_count -= 1
        return keep

    def size(self, target: int) -> int:
        """Return the number of cells in `target`'s set."""

        return -self.cells[self.find(target)]

    def connected(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)

    def count_roots(self) -> int:
        """Count the roots by scanning the array (equals `set_count`)."""

        return sum(1 for value in self.cells if value < 0)
