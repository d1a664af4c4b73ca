"""Round-robin column distribution for the masonry grid.

Pure functions, no Qt: item `i` always lands in column `i % column_count`,
regardless of how tall it is.
"""

from dataclasses import dataclass, field
from typing import List, Sequence


@dataclass
class MasonryPlacement:
    """Represents a positioned item in the masonry layout."""
    index: int
    column: int
    x: float
    y: float
    width: float
    height: float


@dataclass
class MasonryResult:
    column_width: float
    placements: List[MasonryPlacement] = field(default_factory=list)
    column_heights: List[float] = field(default_factory=list)

    @property
    def total_height(self) -> float:
        return max(self.column_heights) if self.column_heights else 0.0


def _check_column_count(column_count: int):
    if column_count <= 0:
        raise ValueError(f"column_count must be greater than 0, got {column_count}")


def column_width(total_width: float, column_count: int, spacing: float) -> float:
    """Width of one column once the gaps between columns are taken out."""
    _check_column_count(column_count)
    total_spacing = spacing * (column_count - 1)
    return (total_width - total_spacing) / column_count


def distribute(item_count: int, column_count: int) -> List[List[int]]:
    """Split item indices 0..item_count-1 over the columns, round-robin."""
    _check_column_count(column_count)
    columns = [[] for _ in range(column_count)]
    for i in range(item_count):
        columns[i % column_count].append(i)
    return columns


def layout_columns(item_heights: Sequence[float], column_count: int, total_width: float,
                   main_axis_spacing: float = 0.0,
                   cross_axis_spacing: float = 0.0) -> MasonryResult:
    """
    Position every item of a round-robin distribution.

    Args:
        item_heights: Height of each item at the computed column width
        column_count: Number of columns
        total_width: Width available to all columns together
        main_axis_spacing: Vertical gap between two items of one column
        cross_axis_spacing: Horizontal gap between two columns

    Returns:
        MasonryResult with one placement per item (in index order) and the
        height of every column
    """
    col_w = column_width(total_width, column_count, cross_axis_spacing)
    columns = distribute(len(item_heights), column_count)

    placements: List[MasonryPlacement] = [None] * len(item_heights)
    column_heights = [0.0] * column_count
    for col, indices in enumerate(columns):
        x = col * (col_w + cross_axis_spacing)
        y = 0.0
        for position, index in enumerate(indices):
            if position > 0:
                y += main_axis_spacing
            height = item_heights[index]
            placements[index] = MasonryPlacement(
                index=index, column=col, x=x, y=y, width=col_w, height=height)
            y += height
        column_heights[col] = y

    return MasonryResult(column_width=col_w, placements=placements,
                         column_heights=column_heights)
