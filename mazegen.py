"""Reusable maze generator module.

Builds a perfect maze with randomized Kruskal: random walls are drawn and
knocked down whenever they separate two cells that are not yet connected,
until a single connected component remains.

Basic usage:

    from mazegen import Maze

    maze = Maze(width=20, height=15, seed=42)
    print(maze.render())

Walls are stored as two boolean grids (True means standing):
`hwalls[r][c]` separates (r, c) from (r + 1, c) and `vwalls[r][c]` separates
(r, c) from (r, c + 1). The entrance is the west border of the top-left cell
and the exit is the east border of the bottom-right cell.
"""

import random
import time
from typing import Callable, List, Optional, Sequence, Tuple

from disjoint_set import DisjointSet


Coord = Tuple[int, int]  # (row, col)


# (drow, dcol): up, down, left, right
DIRECTIONS: Sequence[Coord] = ((-1, 0), (1, 0), (0, -1), (0, 1))

ALGORITHMS = ("sample", "shuffle")

MIN_SIDE = 2


class InvalidDimensionError(ValueError):
    """Width or height below the two-cell minimum."""

    pass


class Maze:
    """A perfect maze carved over a `height` x `width` grid of cells.

    The whole maze is built inside the constructor. Afterwards it is
    read-only: the accessors return copies and `render()` always yields the
    same text.
    """

    _width: int
    _height: int
    _seed: int
    _algorithm: str
    _hwalls: List[List[bool]]
    _vwalls: List[List[bool]]
    _sets: DisjointSet
    _rng: random.Random
    _iterations: int
    _on_progress: Optional[Callable[[int], None]]
    _progress_every: Optional[int]

    def __init__(
        self,
        width: int,
        height: int,
        path_compression: bool = False,
        *,
        seed: Optional[int] = None,
        algorithm: str = "sample",
        on_progress: Optional[Callable[[int], None]] = None,
        progress_every: Optional[int] = None,
    ) -> None:
        if width < MIN_SIDE or height < MIN_SIDE:
            raise InvalidDimensionError(
                f"Width and height must be at least {MIN_SIDE}, "
                f"got {width}x{height}"
            )
        if algorithm not in ALGORITHMS:
            raise ValueError(
                f"Unknown algorithm {algorithm!r} "
                f"(expected one of: {', '.join(ALGORITHMS)})"
            )
        if progress_every is not None and progress_every <= 0:
            raise ValueError("progress_every must be > 0")

        self._width = width
        self._height = height
        self._algorithm = algorithm
        self._seed = time.time_ns() if seed is None else seed
        self._rng = random.Random(self._seed)

        self._hwalls = [[True] * width for _ in range(height - 1)]
        self._vwalls = [[True] * (width - 1) for _ in range(height)]
        self._sets = DisjointSet(width * height, path_compression=path_compression)

        self._iterations = 0
        self._on_progress = on_progress
        self._progress_every = progress_every

        if algorithm == "shuffle":
            self._build_shuffled()
        else:
            self._build_sampled()

        if self._sets.set_count != 1:
            raise RuntimeError("Maze generation left disconnected cells")

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def seed(self) -> int:
        return self._seed

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def path_compression(self) -> bool:
        return self._sets.path_compression

    @property
    def hwalls(self) -> Tuple[Tuple[bool, ...], ...]:
        return tuple(tuple(row) for row in self._hwalls)

    @property
    def vwalls(self) -> Tuple[Tuple[bool, ...], ...]:
        return tuple(tuple(row) for row in self._vwalls)

    @property
    def iterations(self) -> int:
        """Number of carving attempts, including rejected draws."""

        return self._iterations

    @property
    def disjoint_sets(self) -> int:
        return self._sets.count_roots()

    @property
    def removed_walls(self) -> int:
        """Count of knocked-down interior walls."""

        opened = sum(row.count(False) for row in self._hwalls)
        opened += sum(row.count(False) for row in self._vwalls)
        return opened

    @property
    def entrance(self) -> Coord:
        return (0, 0)

    @property
    def exit(self) -> Coord:
        return (self._height - 1, self._width - 1)

    def index(self, row: int, col: int) -> int:
        """Flat cell index of (row, col)."""

        if not (0 <= row < self._height and 0 <= col < self._width):
            raise IndexError(f"Cell ({row}, {col}) is outside the maze")
        return row * self._width + col

    def find(self, index: int) -> int:
        return self._sets.find(index)

    def _report(self) -> None:
        if self._on_progress is None or self._progress_every is None:
            return
        if self._iterations % self._progress_every == 0:
            self._on_progress(self._sets.set_count)

    def _random_cell(self) -> Coord:
        col = self._rng.randrange(self._width)
        row = self._rng.randrange(self._height)
        return (row, col)

    def _try_carve(self, cell: Coord, direction: Coord) -> bool:
        """Join `cell` with its neighbour in `direction` if they are apart.

        Returns False for an out-of-bounds neighbour or when both cells
        already share a root.
        """

        row, col = cell
        drow, dcol = direction
        nrow, ncol = row + drow, col + dcol
        if not (0 <= nrow < self._height and 0 <= ncol < self._width):
            return False

        root1 = self._sets.find(self.index(row, col))
        root2 = self._sets.find(self.index(nrow, ncol))
        if root1 == root2:
            return False

        self._sets.union(root1, root2)
        self._carve_between(cell, (nrow, ncol))
        return True

    def _carve_between(self, a: Coord, b: Coord) -> None:
        ar, ac = a
        br, bc = b
        if br == ar - 1 and bc == ac:
            self._hwalls[br][bc] = False
        elif br == ar + 1 and bc == ac:
            self._hwalls[ar][ac] = False
        elif br == ar and bc == ac - 1:
            self._vwalls[br][bc] = False
        elif br == ar and bc == ac + 1:
            self._vwalls[ar][ac] = False
        else:
            raise ValueError("Cells are not adjacent")

    def _build_sampled(self) -> None:
        while self._sets.set_count > 1:
            self._report()
            self._iterations += 1
            cell = self._random_cell()
            direction = DIRECTIONS[self._rng.randrange(len(DIRECTIONS))]
            self._try_carve(cell, direction)

    def _build_shuffled(self) -> None:
        # Every interior wall once, as (cell, direction towards neighbour).
        edges: List[Tuple[Coord, Coord]] = []
        for r in range(self._height):
            for c in range(self._width):
                if r + 1 < self._height:
                    edges.append(((r, c), (1, 0)))
                if c + 1 < self._width:
                    edges.append(((r, c), (0, 1)))
        self._rng.shuffle(edges)

        for cell, direction in edges:
            if self._sets.set_count == 1:
                break
            self._report()
            self._iterations += 1
            self._try_carve(cell, direction)

    def render(self) -> str:
        """Render the maze as an ASCII diagram.

        Every corner is a `+`. The entrance (left border of the first row)
        and the exit (right border of the last row) are left blank.
        """

        last = self._height - 1
        border = "+---" * self._width + "+"
        lines: List[str] = [border]

        for row in range(self._height):
            parts: List[str] = [" " if row == 0 else "|"]
            for wall in self._vwalls[row]:
                parts.append("   ")
                parts.append("|" if wall else " ")
            parts.append("   ")
            parts.append(" " if row == last else "|")
            lines.append("".join(parts))

            if row == last:
                continue

            parts = ["+"]
            for wall in self._hwalls[row]:
                parts.append("---+" if wall else "   +")
            lines.append("".join(parts))

        lines.append(border)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
