# This file is part of boxgrid.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Self

__version__ = "1.0.0"

__all__ = [
    "Point",
    "Edge",
    "Orientation",
    "BoxSide",
    "Empty",
    "Occupied",
    "EdgeState",
    "EMPTY",
    "BoxGrid",
    "UnsupportedOrientationError",
    "normalized_edge",
]

logger = logging.getLogger(__name__)


class UnsupportedOrientationError(ValueError):
    """Raised when an operation that needs an axis-aligned edge gets a diagonal."""


class Orientation(Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"
    DIAGONAL = "diagonal"


class BoxSide(Enum):
    """Which of the two unit boxes next to an edge is meant."""

    # Towards increasing coordinates (above a horizontal edge, right of a vertical one).
    POSITIVE = "positive"
    # Towards decreasing coordinates (below / left).
    NEGATIVE = "negative"


class Point(NamedTuple):
    """2D integer grid vertex."""

    x: int
    y: int


def _order_key(p: Point) -> tuple[int, int, int]:
    # Coordinate sum first; equal sums fall back to x (then y) so the order is total.
    return p.x + p.y, p.x, p.y


def normalized_edge(p: Point, q: Point) -> "Edge":
    """Canonical representation of an undirected edge.

    The endpoint with the smaller coordinate sum becomes ``start``.
    Ties are broken by the smaller ``x``, so the result never depends on
    the order in which ``p`` and ``q`` are passed.
    """
    return Edge(p, q) if _order_key(p) <= _order_key(q) else Edge(q, p)


class Edge(NamedTuple):
    """
    Segment between two grid vertices.

    Tuple equality compares ``(start, end)`` positionally. Use
    :meth:`same_segment` to compare edges as undirected segments, and
    :meth:`between` (or :func:`normalized_edge`) to build edges that are
    consistent lookup keys.
    """

    start: Point
    end: Point

    @classmethod
    def between(cls, x1: int, y1: int, x2: int, y2: int) -> Self:
        """Build the canonical edge between ``(x1, y1)`` and ``(x2, y2)``."""
        edge = normalized_edge(Point(x1, y1), Point(x2, y2))
        return cls(*edge)

    @property
    def orientation(self) -> Orientation:
        if self.start.x == self.end.x:
            return Orientation.VERTICAL
        if self.start.y == self.end.y:
            return Orientation.HORIZONTAL
        return Orientation.DIAGONAL

    @property
    def length(self) -> int:
        """Number of unit steps covered by an axis-aligned edge."""
        self._require_axis_aligned()
        return abs(self.end.x - self.start.x) + abs(self.end.y - self.start.y)

    def same_segment(self, other: "Edge") -> bool:
        """Return whether both edges join the same two vertices, in either order."""
        return (self.start == other.start and self.end == other.end) or (
            self.start == other.end and self.end == other.start
        )

    def box_corners(self, side: BoxSide) -> tuple[Point, Point]:
        """
        Lower-left and upper-right corners of the box on ``side`` of this edge.

        :raises UnsupportedOrientationError: If the edge is diagonal.
        :raises ValueError: If the box would need a negative coordinate.
        """
        orientation = self._require_axis_aligned()
        lo_x, hi_x = sorted((self.start.x, self.end.x))
        lo_y, hi_y = sorted((self.start.y, self.end.y))

        step = 1 if side is BoxSide.POSITIVE else -1
        if orientation is Orientation.HORIZONTAL:
            lo_y, hi_y = sorted((lo_y, lo_y + step))
        else:
            lo_x, hi_x = sorted((lo_x, lo_x + step))

        if lo_x < 0 or lo_y < 0:
            raise ValueError(f"{self} has no {side.value} box inside the grid.")
        return Point(lo_x, lo_y), Point(hi_x, hi_y)

    def participating_edges(self, side: BoxSide) -> list["Edge"]:
        """
        Return the three edges that close the box on ``side`` of this edge.

        For a horizontal edge the order is left, right, then the opposite
        horizontal edge. For a vertical edge it is top, the opposite vertical
        edge, then bottom. All returned edges are normalized.

        :param side:
            The box to close: :attr:`BoxSide.POSITIVE` lies above a horizontal
            edge or right of a vertical one, :attr:`BoxSide.NEGATIVE` below or left.
        :returns: The three remaining sides of the box.
        :raises UnsupportedOrientationError: If the edge is diagonal.
        :raises ValueError: If the box would need a negative coordinate.
        """
        (x0, y0), (x1, y1) = self.box_corners(side)
        bottom = normalized_edge(Point(x0, y0), Point(x1, y0))
        top = normalized_edge(Point(x0, y1), Point(x1, y1))
        left = normalized_edge(Point(x0, y0), Point(x0, y1))
        right = normalized_edge(Point(x1, y0), Point(x1, y1))

        if self.orientation is Orientation.HORIZONTAL:
            return [left, right, top if side is BoxSide.POSITIVE else bottom]
        return [top, right if side is BoxSide.POSITIVE else left, bottom]

    def _require_axis_aligned(self) -> Orientation:
        orientation = self.orientation
        if orientation is Orientation.DIAGONAL:
            raise UnsupportedOrientationError(f"{self} is diagonal.")
        return orientation

    def __str__(self) -> str:
        (x1, y1), (x2, y2) = self
        return f"({x1}, {y1})-({x2}, {y2})"


@dataclass(frozen=True)
class Empty:
    """Edge nobody has claimed yet."""


@dataclass(frozen=True)
class Occupied:
    """Edge claimed by the player with index ``player_index``."""

    player_index: int


EdgeState = Empty | Occupied
EMPTY = Empty()


class BoxGrid:
    """
    Occupancy of every unit edge addressable in a ``width × height`` grid.

    Horizontal edges are stored in ``rows[y][x]`` (``y < height - 1``,
    ``x < width``) and vertical edges in ``columns[x][y]`` (``x < width - 1``,
    ``y < height``), both keyed by the ``start`` vertex of the normalized
    edge. Cells only ever go from empty to occupied.

    This index space is not the edge set of a ``width × height`` board of
    vertices: vertical cells span ``width - 1`` columns and ``height`` rows,
    horizontal cells the other way round. For non-square grids, and along the
    right and top border of square ones, some board edges have no cell and
    some cells lie off the board. :meth:`edges`, :meth:`contains` and the box
    closure helpers all work in the index space.

    The grid does no locking; concurrent writers must be serialized by the caller.
    """

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ValueError(f"Grid must be at least 1×1, got {width}×{height}.")
        self.width = width
        self.height = height
        self.rows: list[list[EdgeState]] = [
            [EMPTY] * width for _ in range(height - 1)
        ]
        self.columns: list[list[EdgeState]] = [
            [EMPTY] * height for _ in range(width - 1)
        ]

    def max_edges(self) -> int:
        """Total number of addressable edge cells."""
        return (self.width - 1) * self.height + (self.height - 1) * self.width

    def __len__(self) -> int:
        return self.max_edges()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.width}, {self.height}, "
            f"occupied={self.occupied_count()}/{self.max_edges()})"
        )

    def _lines(self, edge: Edge) -> tuple[list[list[EdgeState]], int, int]:
        """Select the container for ``edge`` and its (outer, inner) index."""
        edge = normalized_edge(*edge)
        match edge.orientation:
            case Orientation.VERTICAL:
                return self.columns, edge.start.x, edge.start.y
            case Orientation.HORIZONTAL:
                return self.rows, edge.start.y, edge.start.x
            case Orientation.DIAGONAL:
                raise UnsupportedOrientationError(
                    f"{edge} is diagonal and has no grid cell."
                )

    def contains(self, edge: Edge) -> bool:
        """Return whether ``edge`` is axis-aligned and has a cell in this grid."""
        if edge.orientation is Orientation.DIAGONAL:
            return False
        lines, outer, inner = self._lines(edge)
        return 0 <= outer < len(lines) and 0 <= inner < len(lines[outer])

    def _cell(self, edge: Edge) -> tuple[list[EdgeState], int]:
        lines, outer, inner = self._lines(edge)
        if not (0 <= outer < len(lines) and 0 <= inner < len(lines[outer])):
            raise IndexError(
                f"{edge} lies outside the {self.width}×{self.height} grid."
            )
        return lines[outer], inner

    def state(self, edge: Edge) -> EdgeState:
        """
        Return the occupancy of ``edge``.

        :raises UnsupportedOrientationError: If the edge is diagonal.
        :raises IndexError: If the edge has no cell in this grid.
        """
        line, index = self._cell(edge)
        return line[index]

    def is_occupied(self, edge: Edge) -> bool:
        return isinstance(self.state(edge), Occupied)

    def set_occupied(self, edge: Edge, player_index: int) -> None:
        """
        Mark ``edge`` as claimed by ``player_index``.

        Exactly one cell changes: the one in the container that matches the
        edge's orientation.

        :raises UnsupportedOrientationError: If the edge is diagonal.
        :raises IndexError: If the edge has no cell in this grid.
        :raises ValueError: If ``player_index`` is negative.
        """
        if player_index < 0:
            raise ValueError(f"Invalid player index {player_index}.")
        line, index = self._cell(edge)
        line[index] = Occupied(player_index)
        logger.debug("Edge %s occupied by player %d", edge, player_index)

    def edges(self) -> Iterator[Edge]:
        """Yield the edge of every cell, vertical ones first."""
        for x, column in enumerate(self.columns):
            for y in range(len(column)):
                yield Edge(Point(x, y), Point(x, y + 1))
        for y, row in enumerate(self.rows):
            for x in range(len(row)):
                yield Edge(Point(x, y), Point(x + 1, y))

    def occupied_count(self) -> int:
        return sum(
            isinstance(cell, Occupied)
            for lines in (self.rows, self.columns)
            for line in lines
            for cell in line
        )

    def is_box_closed(self, edge: Edge, side: BoxSide) -> bool:
        """
        Return whether all four edges of the box on ``side`` of ``edge`` are occupied.

        A box is never closed if any of its four edges has no cell in this
        grid (see :class:`BoxGrid`) or if it would reach below zero.

        :raises UnsupportedOrientationError: If the edge is diagonal.
        """
        try:
            others = edge.participating_edges(side)
        except UnsupportedOrientationError:
            raise
        except ValueError:
            return False

        box = [edge, *others]
        return all(self.contains(e) for e in box) and all(
            self.is_occupied(e) for e in box
        )

    def closed_boxes(self, edge: Edge) -> list[BoxSide]:
        """Return the sides of ``edge`` whose box is closed."""
        return [side for side in BoxSide if self.is_box_closed(edge, side)]
