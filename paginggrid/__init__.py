"""Paged, multi-column masonry list widget for PySide6.

Provides:
- PagingController: page-fetch state machine (Loading / Data / Error)
- PagingMasonryGridView: scrollable grid that loads pages on demand
- masonry_distributor: round-robin column distribution and geometry
"""

from .models.data_source import DataSource, ListDataSource
from .models.paging_controller import FetchPhase, InvalidFetchTransition, PagingController
from .models.paging_state import Data, Error, FetchFailed, Loading, PagingState
from .utils.settings import PagingGridConfig
from .widgets.paging_masonry_grid_view import PagingMasonryGridView

__all__ = [
    'DataSource',
    'ListDataSource',
    'FetchPhase',
    'InvalidFetchTransition',
    'PagingController',
    'Data',
    'Error',
    'FetchFailed',
    'Loading',
    'PagingState',
    'PagingGridConfig',
    'PagingMasonryGridView',
]
