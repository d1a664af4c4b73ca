"""
Paging state machine.

PagingController owns the visible PagingState of one list, runs page fetches
on an executor and turns their results into state transitions. Fetches started
through load_more() share a single slot, so at most one of them is in flight;
refresh() is never gated by that slot.
"""

from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from PySide6.QtCore import QObject, Signal

from paginggrid.models.data_source import DataSource
from paginggrid.models.paging_state import Data, Error, FetchFailed, Loading, PagingState
from paginggrid.utils.flow_log import FlowLog, FlowLogger


class FetchPhase(Enum):
    IDLE = 'idle'
    FETCHING = 'fetching'
    FAILED = 'failed'


# Allowed moves of the load_more() fetch slot.
FETCH_TRANSITIONS = {
    FetchPhase.IDLE: frozenset({FetchPhase.FETCHING}),
    FetchPhase.FETCHING: frozenset({FetchPhase.IDLE, FetchPhase.FAILED}),
    FetchPhase.FAILED: frozenset({FetchPhase.FETCHING}),
}


class InvalidFetchTransition(RuntimeError):
    def __init__(self, current: FetchPhase, target: FetchPhase):
        super().__init__(f"Fetch phase cannot move from {current.value} to {target.value}")
        self.current = current
        self.target = target


class FetchKind(Enum):
    REFRESH = 'refresh'
    LOAD_MORE = 'load_more'


@dataclass
class FetchTicket:
    """One submitted fetch and what is needed to apply its result."""
    kind: FetchKind
    # Refresh generation the result belongs to. For load_more() this is the
    # generation of the items in `base`, not the newest refresh issued.
    generation: int
    base: Optional[Data]
    future: Optional[Future] = None


class PagingController(QObject):
    """
    Drives page loading for a paged list.

    Observers connect to `state_changed`, which fires exactly once per state
    transition, always on the thread that owns the controller.
    """

    state_changed = Signal(object)
    # Carries a FetchTicket from the worker thread back to the owner thread.
    _fetch_finished = Signal(object)

    def __init__(self, data_source: DataSource, executor: Optional[Executor] = None,
                 flow_log: Optional[FlowLog] = None, discard_stale_results: bool = False,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._data_source = data_source
        self._owns_executor = executor is None
        self._executor = executor if executor is not None else ThreadPoolExecutor(
            max_workers=2, thread_name_prefix="page_fetch")
        self._flow_log = flow_log if flow_log is not None else FlowLogger()
        self.discard_stale_results = discard_stale_results

        self._state: PagingState = Loading()
        self._fetch_phase = FetchPhase.IDLE
        self._generation = 0
        # Generation of the result currently shown.
        self._applied_generation = 0
        self._disposed = False

        self._fetch_finished.connect(self._on_fetch_finished)

    # ========== Observable state ==========

    @property
    def state(self) -> PagingState:
        return self._state

    @property
    def fetch_phase(self) -> FetchPhase:
        return self._fetch_phase

    @property
    def is_fetching(self) -> bool:
        return self._fetch_phase is FetchPhase.FETCHING

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    # ========== Operations ==========

    def refresh(self) -> Optional[Future]:
        """Reload from the first page, replacing whatever is shown."""
        if self._disposed:
            return None
        self._generation += 1
        return self._submit(FetchTicket(FetchKind.REFRESH, self._generation, base=None),
                            is_refresh=True)

    def retry(self) -> Optional[Future]:
        """Load again after an error; same path as load_more()."""
        return self.load_more()

    def load_more(self) -> Optional[Future]:
        """Fetch the next page, unless a load_more() fetch is already running."""
        if self._disposed:
            return None
        if self.is_fetching:
            self._flow_log("PAGING", "load_more dropped; fetch in flight",
                           throttle_key="paging_dropped", every_s=0.5)
            return None

        if isinstance(self._state, Error):
            # The error is cleared only once a new fetch actually begins.
            self._set_state(Loading())

        state = self._state
        if isinstance(state, Loading):
            base = None
        elif isinstance(state, Data):
            base = state
        else:
            raise TypeError(f"Unknown paging state: {state!r}")

        self._advance_fetch(FetchPhase.FETCHING)
        ticket = FetchTicket(FetchKind.LOAD_MORE, self._applied_generation, base=base)
        return self._submit(ticket, is_refresh=False)

    def notify_scroll_reached_end(self) -> Optional[Future]:
        """Called by the view when the user scrolled to the bottom of the list."""
        state = self._state
        if self._disposed or not isinstance(state, Data):
            return None
        if state.is_end_list or state.is_loading_more or self.is_fetching:
            return None

        # Show the load-more affordance right away, then fetch.
        self._set_state(state.copy_with(is_loading_more=True))
        return self.load_more()

    def dispose(self):
        """Stop reacting to fetch completions. Late results are dropped."""
        if self._disposed:
            return
        self._disposed = True
        self._flow_log("PAGING", "Controller disposed", level="INFO")
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    # ========== Fetching ==========

    def _advance_fetch(self, target: FetchPhase):
        if target not in FETCH_TRANSITIONS[self._fetch_phase]:
            raise InvalidFetchTransition(self._fetch_phase, target)
        self._fetch_phase = target

    def _load(self, is_refresh: bool):
        """Runs on a worker thread."""
        page = list(self._data_source.load_page(is_refresh=is_refresh))
        return page, bool(self._data_source.is_end_list)

    def _submit(self, ticket: FetchTicket, is_refresh: bool) -> Future:
        self._flow_log("PAGING", f"Fetch start kind={ticket.kind.value}",
                       generation=ticket.generation)
        try:
            ticket.future = self._executor.submit(self._load, is_refresh)
        except RuntimeError as e:
            # Executor already shut down; report it like any other fetch failure.
            ticket.future = Future()
            ticket.future.set_exception(e)
        ticket.future.add_done_callback(lambda _future: self._deliver(ticket))
        return ticket.future

    def _deliver(self, ticket: FetchTicket):
        """Done-callback; may run on the worker thread."""
        if self._disposed:
            return
        try:
            self._fetch_finished.emit(ticket)
        except RuntimeError:
            # The underlying QObject is already gone.
            return

    def _on_fetch_finished(self, ticket: FetchTicket):
        if self._disposed:
            return

        holds_slot = ticket.kind is FetchKind.LOAD_MORE
        stale = ticket.generation != self._generation
        if stale and self.discard_stale_results:
            if holds_slot:
                self._advance_fetch(FetchPhase.IDLE)
            self._flow_log("PAGING", f"Dropped stale {ticket.kind.value} result",
                           level="INFO", generation=ticket.generation,
                           current=self._generation)
            return

        try:
            page, is_end_list = ticket.future.result()
        except Exception as e:
            failure = FetchFailed(e)
            if holds_slot:
                self._advance_fetch(FetchPhase.FAILED)
            self._flow_log("PAGING", f"Fetch failed kind={ticket.kind.value}: {e!r}",
                           level="ERROR")
            self._applied_generation = ticket.generation
            self._set_state(Error(failure))
            return

        if holds_slot:
            self._advance_fetch(FetchPhase.IDLE)
        self._flow_log("PAGING", f"Fetch done kind={ticket.kind.value}",
                       items=len(page), end=is_end_list)
        self._applied_generation = ticket.generation
        self._set_state(self._next_state(ticket, page, is_end_list))

    @staticmethod
    def _next_state(ticket: FetchTicket, page: list, is_end_list: bool) -> Data:
        if ticket.kind is FetchKind.REFRESH or ticket.base is None:
            return Data(page, False, is_end_list)
        if not page:
            # An empty page ends the list whatever the source claims.
            return ticket.base.copy_with(is_loading_more=False, is_end_list=True)
        return ticket.base.appended(page, is_end_list)

    def _set_state(self, state: PagingState):
        self._state = state
        self._flow_log("PAGING", f"State -> {state.name}")
        self.state_changed.emit(state)
