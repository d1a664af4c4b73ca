import logging
import os
import random
import sys
import threading
import traceback
import warnings
from datetime import datetime

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QColor
from PySide6.QtWidgets import (QApplication, QCheckBox, QLabel, QMainWindow,
                               QMessageBox, QToolBar, QVBoxLayout, QWidget)

from paginggrid.models.data_source import ListDataSource
from paginggrid.utils.flow_log import FlowLogger
from paginggrid.utils.settings import DEFAULT_SETTINGS, PagingGridConfig, settings
from paginggrid.widgets.paging_masonry_grid_view import PagingMasonryGridView

CRASH_LOG_PATH = os.path.abspath('paginggrid_crash.log')


def _append_crash_log(title: str, exc_info=None):
    """Append a timestamped crash entry to the crash log."""
    ts = datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    try:
        with open(CRASH_LOG_PATH, 'a', encoding='utf-8') as f:
            f.write("\n" + "=" * 80 + "\n")
            f.write(f"{ts} | {title}\n")
            f.write("=" * 80 + "\n")
            if exc_info is None:
                f.write(traceback.format_exc())
            else:
                f.writelines(traceback.format_exception(*exc_info))
            f.write("\n")
    except Exception as log_error:
        print(f"[CRASH] Failed to write crash log: {log_error}")
    print(f"[CRASH] Details written to: {CRASH_LOG_PATH}")


def install_crash_handlers():
    """Log unhandled exceptions from the main thread and worker threads."""

    def _unhandled_exception(exc_type, exc_value, exc_traceback):
        _append_crash_log("UNHANDLED EXCEPTION", (exc_type, exc_value, exc_traceback))
        sys.__excepthook__(exc_type, exc_value, exc_traceback)

    def _thread_exception(args):
        thread_name = getattr(args.thread, 'name', 'unknown')
        _append_crash_log(
            f"THREAD EXCEPTION ({thread_name})",
            (args.exc_type, args.exc_value, args.exc_traceback),
        )

    sys.excepthook = _unhandled_exception
    threading.excepthook = _thread_exception


def suppress_warnings():
    """Suppress all warnings when not in a development environment."""
    environment = os.getenv('PAGINGGRID_ENVIRONMENT')
    if environment == 'development':
        print('Running in development environment.')
        logging.basicConfig(level=logging.DEBUG)
        return
    logging.basicConfig(level=logging.ERROR)
    warnings.simplefilter('ignore')


class DemoCard(QLabel):
    """Colored card whose height depends on the item, to show off the masonry."""

    def __init__(self, parent, item, index):
        super().__init__(f'#{index}\n{item["title"]}', parent)
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setFixedHeight(item['height'])
        color = QColor.fromHsv(item['hue'], 90, 230)
        self.setStyleSheet(f'background: {color.name()}; border-radius: 6px;')


def build_demo_items(count: int, seed: int = 7) -> list:
    rng = random.Random(seed)
    return [
        {'title': f'Item {i}', 'height': rng.randint(60, 220), 'hue': rng.randint(0, 359)}
        for i in range(count)
    ]


class DemoWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle('Paging masonry grid')
        self.resize(720, 800)

        item_count = settings.value('demo_item_count',
                                    defaultValue=DEFAULT_SETTINGS['demo_item_count'], type=int)
        page_size = settings.value('demo_page_size',
                                   defaultValue=DEFAULT_SETTINGS['demo_page_size'], type=int)
        latency_ms = settings.value('demo_latency_ms',
                                    defaultValue=DEFAULT_SETTINGS['demo_latency_ms'], type=int)

        self._fail_pages = False
        self.fail_checkbox = QCheckBox('Fail page loads')
        self.fail_checkbox.toggled.connect(self._on_fail_toggled)
        self.data_source = ListDataSource(
            build_demo_items(item_count), page_size=page_size,
            latency=latency_ms / 1000, fail_when=self._maybe_fail)

        self.grid_view = PagingMasonryGridView(
            self.data_source,
            item_builder=DemoCard,
            config=PagingGridConfig.from_settings(),
            flow_log=FlowLogger(),
        )

        toolbar = QToolBar('Paging', self)
        refresh_action = QAction('Refresh', self)
        refresh_action.triggered.connect(self.grid_view.refresh)
        toolbar.addAction(refresh_action)
        toolbar.addWidget(self.fail_checkbox)
        self.addToolBar(toolbar)

        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.addWidget(self.grid_view)
        self.setCentralWidget(central)

    def _on_fail_toggled(self, checked: bool):
        self._fail_pages = checked

    def _maybe_fail(self, page_num: int):
        if self._fail_pages:
            return ConnectionError(f'Simulated failure loading page {page_num}')
        return None

    def closeEvent(self, event):
        self.grid_view.dispose()
        super().closeEvent(event)


def run_gui():
    app = QApplication([])
    app.setApplicationName('paginggrid')
    app.setApplicationDisplayName('Paging masonry grid')
    app.setStyle('Fusion')

    main_window = DemoWindow()
    main_window.show()
    return int(app.exec())


def main():
    """Entry point: crash logging first, then the demo window."""
    suppress_warnings()
    install_crash_handlers()
    try:
        return run_gui()
    except Exception as exception:
        _append_crash_log("TOP-LEVEL EXCEPTION", sys.exc_info())
        error_message_box = QMessageBox()
        error_message_box.setWindowTitle('Error')
        error_message_box.setIcon(QMessageBox.Icon.Critical)
        error_message_box.setText(str(exception))
        error_message_box.setDetailedText(traceback.format_exc())
        error_message_box.exec()
        return 1


if __name__ == '__main__':
    sys.exit(main())
