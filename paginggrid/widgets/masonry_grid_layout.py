"""QLayout that arranges child widgets in round-robin masonry columns."""

import math
from typing import List, Optional

from PySide6.QtCore import QPoint, QRect, QSize, Qt
from PySide6.QtWidgets import QLayout, QLayoutItem, QWidget

from paginggrid.widgets.masonry_distributor import MasonryResult, column_width, layout_columns


class MasonryGridLayout(QLayout):
    """
    Places items in `column_count` columns of equal width.

    Every column is an independent vertical stack, so item heights only
    affect their own column. Heights come from heightForWidth() when an item
    supports it, otherwise from its size hint.
    """

    def __init__(self, parent: Optional[QWidget] = None, column_count: int = 2,
                 main_axis_spacing: float = 0.0, cross_axis_spacing: float = 0.0):
        super().__init__(parent)
        if column_count <= 0:
            raise ValueError(f"column_count must be greater than 0, got {column_count}")
        self.column_count = column_count
        self.main_axis_spacing = main_axis_spacing
        self.cross_axis_spacing = cross_axis_spacing
        self._items: List[QLayoutItem] = []
        self._last_result: Optional[MasonryResult] = None

    def __del__(self):
        item = self.takeAt(0)
        while item:
            item = self.takeAt(0)

    # ========== QLayout interface ==========

    def addItem(self, item: QLayoutItem):
        self._items.append(item)

    def count(self) -> int:
        return len(self._items)

    def itemAt(self, index: int):
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def takeAt(self, index: int):
        if 0 <= index < len(self._items):
            return self._items.pop(index)
        return None

    def expandingDirections(self):
        return Qt.Orientation(0)

    def hasHeightForWidth(self) -> bool:
        return True

    def heightForWidth(self, width: int) -> int:
        return self._do_layout(QRect(0, 0, width, 0), apply=False)

    def setGeometry(self, rect: QRect):
        super().setGeometry(rect)
        self._do_layout(rect, apply=True)

    def sizeHint(self) -> QSize:
        return self.minimumSize()

    def minimumSize(self) -> QSize:
        size = QSize()
        for item in self._items:
            size = size.expandedTo(item.minimumSize())
        margins = self.contentsMargins()
        size += QSize(margins.left() + margins.right(), margins.top() + margins.bottom())
        return size

    # ========== Layout ==========

    @property
    def last_result(self) -> Optional[MasonryResult]:
        """Geometry of the most recent setGeometry() pass."""
        return self._last_result

    def column_width_for(self, width: int) -> float:
        return max(0.0, column_width(width, self.column_count, self.cross_axis_spacing))

    @staticmethod
    def _item_height(item: QLayoutItem, width: int) -> int:
        if item.hasHeightForWidth():
            return item.heightForWidth(width)
        return item.sizeHint().height()

    def _do_layout(self, rect: QRect, apply: bool) -> int:
        margins = self.contentsMargins()
        effective = rect.adjusted(margins.left(), margins.top(), -margins.right(), -margins.bottom())
        available = max(0, effective.width())

        item_width = int(self.column_width_for(available))
        heights = [max(0, self._item_height(item, item_width)) for item in self._items]
        result = layout_columns(heights, self.column_count, available,
                                self.main_axis_spacing, self.cross_axis_spacing)

        if apply:
            for item, placement in zip(self._items, result.placements):
                item.setGeometry(QRect(
                    QPoint(effective.x() + round(placement.x), effective.y() + round(placement.y)),
                    QSize(item_width, int(placement.height)),
                ))
            self._last_result = result

        return int(math.ceil(result.total_height)) + margins.top() + margins.bottom()
