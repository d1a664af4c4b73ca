from dataclasses import dataclass
from typing import Optional, Tuple

from PySide6.QtCore import QSettings, Signal

# Defaults for settings that are accessed from multiple places.
DEFAULT_SETTINGS = {
    'paging_column_count': 2,
    'paging_main_axis_spacing': 8.0,
    'paging_cross_axis_spacing': 8.0,
    'paging_pull_to_refresh': True,
    'paging_padding': '0, 0, 0, 0',  # left, top, right, bottom
    'paging_discard_stale_results': False,  # Drop load-more results that finish after a refresh
    'demo_item_count': 137,
    'demo_page_size': 20,
    'demo_latency_ms': 400,
    'minimal_trace_logs': True,  # Only INFO and above from the flow logger
}


class Settings(QSettings):
    # Signal that shows that the setting with the given string was changes
    change = Signal(str, object, name='settingsChanged')

    def __init__(self, file_path=None):
        if file_path is None:
            super().__init__('paginggrid', 'paginggrid')
        else:
            super().__init__(str(file_path), QSettings.Format.IniFormat)

    def setValue(self, key, value):
        super().setValue(key, value)
        self.change.emit(key, value)

# Common shared instance to ensure the Signal is also shared
settings = Settings()


def parse_padding(text) -> Tuple[int, int, int, int]:
    """Parse 'left, top, right, bottom' (or a single value for all four sides)."""
    if isinstance(text, (list, tuple)):
        parts = [str(part) for part in text]
    else:
        parts = [part for part in str(text).replace(';', ',').split(',')]
    values = [int(float(part.strip())) for part in parts if part.strip()]
    if len(values) == 1:
        values = values * 4
    if len(values) != 4:
        raise ValueError(f"Padding needs 1 or 4 values, got {text!r}")
    return tuple(values)


@dataclass(frozen=True)
class PagingGridConfig:
    """Construction-time options of a PagingMasonryGridView, validated once."""

    column_count: int = DEFAULT_SETTINGS['paging_column_count']
    main_axis_spacing: float = DEFAULT_SETTINGS['paging_main_axis_spacing']
    cross_axis_spacing: float = DEFAULT_SETTINGS['paging_cross_axis_spacing']
    pull_to_refresh_enabled: bool = DEFAULT_SETTINGS['paging_pull_to_refresh']
    padding: Tuple[int, int, int, int] = (0, 0, 0, 0)
    discard_stale_results: bool = DEFAULT_SETTINGS['paging_discard_stale_results']

    def __post_init__(self):
        if isinstance(self.column_count, bool) or not isinstance(self.column_count, int):
            raise ValueError(f"column_count must be an int, got {self.column_count!r}")
        if self.column_count <= 0:
            raise ValueError(f"column_count must be greater than 0, got {self.column_count}")
        if self.main_axis_spacing < 0:
            raise ValueError(f"main_axis_spacing must be >= 0, got {self.main_axis_spacing}")
        if self.cross_axis_spacing < 0:
            raise ValueError(f"cross_axis_spacing must be >= 0, got {self.cross_axis_spacing}")
        padding = tuple(self.padding)
        if len(padding) != 4 or any(value < 0 for value in padding):
            raise ValueError(f"padding must be four values >= 0, got {self.padding!r}")
        object.__setattr__(self, 'padding', padding)

    @classmethod
    def from_settings(cls, store: Optional[QSettings] = None, **overrides) -> 'PagingGridConfig':
        """Build a config from stored settings; keyword overrides win."""
        store = store if store is not None else settings
        values = {
            'column_count': store.value(
                'paging_column_count',
                defaultValue=DEFAULT_SETTINGS['paging_column_count'], type=int),
            'main_axis_spacing': store.value(
                'paging_main_axis_spacing',
                defaultValue=DEFAULT_SETTINGS['paging_main_axis_spacing'], type=float),
            'cross_axis_spacing': store.value(
                'paging_cross_axis_spacing',
                defaultValue=DEFAULT_SETTINGS['paging_cross_axis_spacing'], type=float),
            'pull_to_refresh_enabled': store.value(
                'paging_pull_to_refresh',
                defaultValue=DEFAULT_SETTINGS['paging_pull_to_refresh'], type=bool),
            'padding': parse_padding(store.value(
                'paging_padding', defaultValue=DEFAULT_SETTINGS['paging_padding'])),
            'discard_stale_results': store.value(
                'paging_discard_stale_results',
                defaultValue=DEFAULT_SETTINGS['paging_discard_stale_results'], type=bool),
        }
        values.update(overrides)
        return cls(**values)
