"""
Visible state of a paged list.

A PagingState is exactly one of Loading, Data or Error. Use `when()` to
dispatch on the variant instead of chains of isinstance checks.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Sequence


class FetchFailed(Exception):
    """Any failure raised by a data source while loading a page."""

    def __init__(self, cause: BaseException):
        super().__init__(str(cause))
        self.cause = cause

    def __repr__(self):
        return f"FetchFailed({self.cause!r})"


class PagingState:
    """Base for the three state variants."""

    __slots__ = ()

    def when(self, data: Callable, loading: Callable, error: Callable):
        """Call the handler matching this variant and return its result."""
        if isinstance(self, Data):
            return data(self.items, self.is_loading_more, self.is_end_list)
        if isinstance(self, Loading):
            return loading()
        if isinstance(self, Error):
            return error(self.error)
        raise TypeError(f"Unknown paging state: {self!r}")

    @property
    def name(self) -> str:
        return type(self).__name__.lower()


@dataclass(frozen=True)
class Loading(PagingState):
    """Nothing to show yet; the first page is on its way."""


@dataclass(frozen=True)
class Data(PagingState):
    items: tuple = ()
    is_loading_more: bool = False
    is_end_list: bool = False

    def __post_init__(self):
        # Frozen dataclass, so normalize through object.__setattr__.
        object.__setattr__(self, 'items', tuple(self.items))
        object.__setattr__(self, 'is_loading_more', bool(self.is_loading_more))
        object.__setattr__(self, 'is_end_list', bool(self.is_end_list))

    def copy_with(self, **changes) -> 'Data':
        return replace(self, **changes)

    def appended(self, page: Sequence[Any], is_end_list: bool) -> 'Data':
        """Return a copy with `page` added after the current items."""
        return Data(self.items + tuple(page), False, is_end_list)


@dataclass(frozen=True)
class Error(PagingState):
    error: FetchFailed

    def __post_init__(self):
        if not isinstance(self.error, FetchFailed):
            object.__setattr__(self, 'error', FetchFailed(self.error))

    @property
    def cause(self):
        return self.error.cause
