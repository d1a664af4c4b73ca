import time
from concurrent.futures import Executor
from typing import Any, Callable, List, Optional

from PySide6.QtCore import QEvent, QObject, QTimer, Signal
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import QFrame, QScrollArea, QVBoxLayout, QWidget

from paginggrid.models.data_source import DataSource
from paginggrid.models.paging_controller import PagingController
from paginggrid.models.paging_state import PagingState
from paginggrid.utils.flow_log import FlowLog
from paginggrid.utils.settings import PagingGridConfig
from paginggrid.widgets.masonry_grid_layout import MasonryGridLayout
from paginggrid.widgets.placeholders import (EmptyPlaceholder, ErrorPlaceholder,
                                             LoadMorePlaceholder, LoadingPlaceholder)

ItemBuilder = Callable[[QWidget, Any, int], QWidget]
WidgetBuilder = Callable[[QWidget], QWidget]
ErrorBuilder = Callable[[QWidget, Any], QWidget]

# One wheel gesture produces many events; only the first one refreshes.
PULL_TO_REFRESH_COOLDOWN_S = 1.0


class PagingMasonryGridView(QWidget):
    """
    Scrollable masonry grid that pages items in from a data source.

    Items are spread over `config.column_count` columns round-robin, each
    column sized by the heights of its own items. The first page is requested
    as soon as the view is created; later pages load when the user scrolls to
    the bottom.
    """

    # Emitted after the view has been rebuilt for a new state.
    state_rendered = Signal(object)

    def __init__(self, data_source: DataSource, item_builder: ItemBuilder,
                 config: Optional[PagingGridConfig] = None,
                 empty_builder: Optional[WidgetBuilder] = None,
                 loading_builder: Optional[WidgetBuilder] = None,
                 error_builder: Optional[ErrorBuilder] = None,
                 load_more_builder: Optional[WidgetBuilder] = None,
                 executor: Optional[Executor] = None,
                 flow_log: Optional[FlowLog] = None,
                 parent: Optional[QWidget] = None):
        super().__init__(parent)
        if item_builder is None:
            raise ValueError("item_builder is required")
        self.config = config if config is not None else PagingGridConfig()
        self.item_builder = item_builder
        self.empty_builder = empty_builder
        self.loading_builder = loading_builder
        self.error_builder = error_builder
        self.load_more_builder = load_more_builder

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._body: Optional[QWidget] = None

        # Data body parts, only alive while a non-empty Data state is shown
        self._scroll_area: Optional[QScrollArea] = None
        self._grid_container: Optional[QWidget] = None
        self._grid_layout: Optional[MasonryGridLayout] = None
        self._load_more_footer: Optional[QWidget] = None
        self._item_widgets: List[QWidget] = []
        self._rendered_items: tuple = ()
        self._rendered_generation = -1
        self._last_pull_time = 0.0

        # Re-checks whether the grid still needs another page to fill the viewport
        self._fill_check_timer = QTimer(self)
        self._fill_check_timer.setSingleShot(True)
        self._fill_check_timer.timeout.connect(self._check_viewport_filled)

        self.controller = PagingController(
            data_source, executor=executor, flow_log=flow_log,
            discard_stale_results=self.config.discard_stale_results, parent=self)
        self.controller.state_changed.connect(self._render)
        controller = self.controller
        self.destroyed.connect(lambda *_: controller.dispose())

        self._refresh_shortcut = QShortcut(QKeySequence(QKeySequence.StandardKey.Refresh), self)
        self._refresh_shortcut.activated.connect(self._on_pull_to_refresh)

        self._render(self.controller.state)
        self.controller.load_more()

    # ========== Public API ==========

    @property
    def state(self) -> PagingState:
        return self.controller.state

    @property
    def item_widgets(self) -> List[QWidget]:
        return list(self._item_widgets)

    @property
    def body(self) -> Optional[QWidget]:
        return self._body

    @property
    def scroll_area(self) -> Optional[QScrollArea]:
        return self._scroll_area

    @property
    def grid_layout(self) -> Optional[MasonryGridLayout]:
        return self._grid_layout

    @property
    def load_more_footer(self) -> Optional[QWidget]:
        return self._load_more_footer

    def refresh(self):
        return self.controller.refresh()

    def retry(self):
        return self.controller.retry()

    def load_more(self):
        return self.controller.load_more()

    def dispose(self):
        self.controller.dispose()

    # ========== Rendering ==========

    def _render(self, state: PagingState):
        state.when(
            data=self._show_data,
            loading=self._show_loading,
            error=self._show_error,
        )
        self.state_rendered.emit(state)

    def _show_loading(self):
        widget = self.loading_builder(self) if self.loading_builder else None
        self._set_body(widget or LoadingPlaceholder(self))

    def _show_error(self, error):
        widget = self.error_builder(self, error) if self.error_builder else None
        if widget is None:
            widget = ErrorPlaceholder(error, self)
            widget.retry_requested.connect(self.retry)
        self._set_body(widget)

    def _show_data(self, items: tuple, is_loading_more: bool, is_end_list: bool):
        if not items:
            widget = self.empty_builder(self) if self.empty_builder else None
            self._set_body(widget or EmptyPlaceholder(self))
            return

        if not self._can_extend(items):
            self._set_body(self._build_data_body())
        self._sync_items(items)
        self._load_more_footer.setVisible(not is_end_list)
        if not is_end_list:
            self._fill_check_timer.start(0)

    def _set_body(self, widget: QWidget):
        if self._body is widget:
            return
        if self._body is not None:
            self._layout.removeWidget(self._body)
            self._body.hide()
            self._body.deleteLater()
        if self._body is self._scroll_area:
            self._scroll_area = None
            self._grid_container = None
            self._grid_layout = None
            self._load_more_footer = None
            self._item_widgets = []
            self._rendered_items = ()
            self._rendered_generation = -1
        self._body = widget
        self._layout.addWidget(widget)
        widget.show()

    def _can_extend(self, items: tuple) -> bool:
        """True when `items` only appends to what the grid already shows."""
        if self._scroll_area is None or self._body is not self._scroll_area:
            return False
        if self._rendered_generation != self.controller.generation:
            return False
        count = len(self._rendered_items)
        if len(items) < count:
            return False
        return all(new is old for new, old in zip(items[:count], self._rendered_items))

    def _build_data_body(self) -> QScrollArea:
        scroll_area = QScrollArea(self)
        scroll_area.setWidgetResizable(True)
        scroll_area.setFrameShape(QFrame.Shape.NoFrame)

        content = QWidget()
        content_layout = QVBoxLayout(content)
        left, top, right, bottom = self.config.padding
        content_layout.setContentsMargins(left, top, right, bottom)
        content_layout.setSpacing(0)

        self._grid_container = QWidget(content)
        self._grid_layout = MasonryGridLayout(
            self._grid_container,
            column_count=self.config.column_count,
            main_axis_spacing=self.config.main_axis_spacing,
            cross_axis_spacing=self.config.cross_axis_spacing,
        )
        self._grid_layout.setContentsMargins(0, 0, 0, 0)
        content_layout.addWidget(self._grid_container)

        footer = None
        if self.load_more_builder:
            footer = self.load_more_builder(content)
        elif self.loading_builder:
            footer = self.loading_builder(content)
        self._load_more_footer = footer or LoadMorePlaceholder(content)
        content_layout.addWidget(self._load_more_footer)
        content_layout.addStretch(1)

        scroll_area.setWidget(content)
        scroll_area.verticalScrollBar().valueChanged.connect(self._on_scroll_value_changed)
        scroll_area.verticalScrollBar().rangeChanged.connect(self._on_scroll_range_changed)
        scroll_area.viewport().installEventFilter(self)

        self._scroll_area = scroll_area
        self._item_widgets = []
        self._rendered_items = ()
        self._rendered_generation = self.controller.generation
        return scroll_area

    def _sync_items(self, items: tuple):
        for index in range(len(self._rendered_items), len(items)):
            widget = self.item_builder(self._grid_container, items[index], index)
            self._grid_layout.addWidget(widget)
            self._item_widgets.append(widget)
        self._rendered_items = items

    # ========== Scrolling ==========

    def _on_scroll_value_changed(self, value: int):
        if self._scroll_area is None:
            return
        bar = self._scroll_area.verticalScrollBar()
        if bar.maximum() > 0 and value >= bar.maximum():
            self.controller.notify_scroll_reached_end()

    def _on_scroll_range_changed(self, minimum: int, maximum: int):
        if maximum == minimum:
            self._fill_check_timer.start(0)

    def _check_viewport_filled(self):
        """Pages that do not fill the viewport leave nothing to scroll, so ask for more."""
        if self._scroll_area is None or not self.isVisible():
            return
        if self._scroll_area.verticalScrollBar().maximum() == 0:
            self.controller.notify_scroll_reached_end()

    def showEvent(self, event):
        super().showEvent(event)
        self._fill_check_timer.start(0)

    def _on_pull_to_refresh(self):
        if self.config.pull_to_refresh_enabled:
            self.controller.refresh()

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if (self._scroll_area is not None
                and watched is self._scroll_area.viewport()
                and event.type() == QEvent.Type.Wheel):
            bar = self._scroll_area.verticalScrollBar()
            now = time.time()
            if (event.angleDelta().y() > 0 and bar.value() == bar.minimum()
                    and now - self._last_pull_time >= PULL_TO_REFRESH_COOLDOWN_S):
                self._last_pull_time = now
                self._on_pull_to_refresh()
        return super().eventFilter(watched, event)
