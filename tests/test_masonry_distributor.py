import pytest

from paginggrid.widgets.masonry_distributor import column_width, distribute, layout_columns


def test_distribute_round_robin():
    columns = distribute(item_count=7, column_count=3)

    assert columns == [[0, 3, 6], [1, 4], [2, 5]]
    assert [len(column) for column in columns] == [3, 2, 2]


def test_distribute_is_stable():
    assert distribute(11, 4) == distribute(11, 4)


def test_distribute_fewer_items_than_columns():
    assert distribute(2, 4) == [[0], [1], [], []]
    assert distribute(0, 3) == [[], [], []]


def test_column_width_subtracts_gaps():
    assert column_width(total_width=100, column_count=3, spacing=10) == pytest.approx(80 / 3)
    assert column_width(total_width=100, column_count=1, spacing=10) == 100


@pytest.mark.parametrize("column_count", [0, -1])
def test_non_positive_column_count_rejected(column_count):
    with pytest.raises(ValueError):
        column_width(100, column_count, 0)
    with pytest.raises(ValueError):
        distribute(3, column_count)


def test_layout_columns_positions_items():
    result = layout_columns([10, 20, 30, 40, 50], column_count=2, total_width=100,
                            main_axis_spacing=5, cross_axis_spacing=10)

    assert result.column_width == 45
    positions = [(p.column, p.x, p.y, p.width, p.height) for p in result.placements]
    assert positions == [
        (0, 0, 0, 45, 10),
        (1, 55, 0, 45, 20),
        (0, 0, 15, 45, 30),
        (1, 55, 25, 45, 40),
        (0, 0, 50, 45, 50),
    ]
    # No spacing after the last item of a column
    assert result.column_heights == [100, 65]
    assert result.total_height == 100


def test_layout_columns_placement_follows_index_not_height():
    result = layout_columns([500, 10, 10, 10], column_count=2, total_width=200)

    assert [p.column for p in result.placements] == [0, 1, 0, 1]


def test_layout_columns_empty():
    result = layout_columns([], column_count=3, total_width=300)

    assert result.placements == []
    assert result.column_heights == [0, 0, 0]
    assert result.total_height == 0
