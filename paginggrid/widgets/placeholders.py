"""Built-in widgets shown when the caller does not provide its own."""

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLabel, QProgressBar, QPushButton, QVBoxLayout, QWidget


class _CenteredPlaceholder(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._layout = QVBoxLayout(self)
        self._layout.setAlignment(Qt.AlignmentFlag.AlignCenter)


class LoadingPlaceholder(_CenteredPlaceholder):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.progress_bar = QProgressBar(self)
        self.progress_bar.setRange(0, 0)  # Busy indicator
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setFixedWidth(160)
        self._layout.addWidget(self.progress_bar, alignment=Qt.AlignmentFlag.AlignCenter)


class EmptyPlaceholder(_CenteredPlaceholder):
    def __init__(self, parent=None, text: str = 'No items'):
        super().__init__(parent)
        self.label = QLabel(text, self)
        self.label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._layout.addWidget(self.label)


class ErrorPlaceholder(_CenteredPlaceholder):
    """Shows the failure and a button to try again."""

    retry_requested = Signal()

    def __init__(self, error, parent=None):
        super().__init__(parent)
        self.error = error
        cause = getattr(error, 'cause', error)
        self.label = QLabel(f'Could not load items.\n{cause}', self)
        self.label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.label.setWordWrap(True)
        self.retry_button = QPushButton('Retry', self)
        self.retry_button.clicked.connect(lambda: self.retry_requested.emit())
        self._layout.addWidget(self.label)
        self._layout.addWidget(self.retry_button, alignment=Qt.AlignmentFlag.AlignCenter)


class LoadMorePlaceholder(QWidget):
    """Slim busy bar appended below the grid while more pages exist."""

    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 8)
        self.progress_bar = QProgressBar(self)
        self.progress_bar.setRange(0, 0)
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setMaximumHeight(6)
        layout.addWidget(self.progress_bar)
