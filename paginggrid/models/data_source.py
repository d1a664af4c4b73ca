"""
Data sources feed pages of items to a PagingController.

`load_page()` is a blocking call; the controller runs it on a worker thread.
"""

import threading
import time
from typing import Any, Callable, List, Optional, Protocol, Sequence, runtime_checkable


DEFAULT_PAGE_SIZE = 20


@runtime_checkable
class DataSource(Protocol):
    """What a PagingController needs from the thing that fetches pages."""

    @property
    def is_end_list(self) -> bool:
        """True once the most recent successful load_page() hit the last page."""
        ...

    def load_page(self, is_refresh: bool = False) -> Sequence[Any]:
        """Return the next page, or the first page again when is_refresh is set."""
        ...


class ListDataSource:
    """
    Serves an in-memory sequence in fixed-size pages.

    Useful for demos and tests: `latency` simulates a slow backend and
    `fail_when` lets a caller inject failures for a given page number.
    """

    def __init__(self, items: Sequence[Any], page_size: int = DEFAULT_PAGE_SIZE,
                 latency: float = 0.0,
                 fail_when: Optional[Callable[[int], Optional[BaseException]]] = None):
        if page_size <= 0:
            raise ValueError(f"page_size must be greater than 0, got {page_size}")
        self._items = list(items)
        self.page_size = page_size
        self.latency = latency
        self.fail_when = fail_when

        self._next_page = 0
        self._is_end_list = False
        self._lock = threading.Lock()
        self.load_calls: List[bool] = []

    @property
    def is_end_list(self) -> bool:
        return self._is_end_list

    @property
    def next_page(self) -> int:
        return self._next_page

    def load_page(self, is_refresh: bool = False) -> List[Any]:
        with self._lock:
            self.load_calls.append(is_refresh)
            page_num = 0 if is_refresh else self._next_page

        if self.latency > 0:
            time.sleep(self.latency)

        if self.fail_when is not None:
            error = self.fail_when(page_num)
            if error is not None:
                raise error

        start = page_num * self.page_size
        page = self._items[start:start + self.page_size]

        with self._lock:
            self._next_page = page_num + 1
            self._is_end_list = start + self.page_size >= len(self._items)
        return page
