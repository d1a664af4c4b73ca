"""Timestamped, optionally throttled flow logging for paging diagnostics."""

import time
from typing import Callable, Dict, Optional, Protocol

from paginggrid.utils.settings import DEFAULT_SETTINGS, settings

LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR')


class FlowLog(Protocol):
    def __call__(self, component: str, message: str, *, level: str = 'DEBUG',
                 throttle_key: Optional[str] = None, every_s: Optional[float] = None,
                 **fields) -> None:
        ...


class FlowLogger:
    """
    Callable flow log sink.

    Lines look like `[12:00:01.250][TRACE][PAGING][INFO] fetch done items=20`.
    When `minimal` is None the `minimal_trace_logs` setting decides whether
    DEBUG lines are dropped.
    """

    def __init__(self, sink: Callable[[str], None] = print, minimal: Optional[bool] = None,
                 clock: Callable[[], float] = time.time):
        self._sink = sink
        self._minimal = minimal
        self._clock = clock
        self._last_emit: Dict[str, float] = {}

    def _minimal_trace(self) -> bool:
        if self._minimal is not None:
            return self._minimal
        try:
            return bool(settings.value(
                'minimal_trace_logs',
                defaultValue=DEFAULT_SETTINGS['minimal_trace_logs'], type=bool))
        except Exception:
            return True

    def __call__(self, component: str, message: str, *, level: str = 'DEBUG',
                 throttle_key: Optional[str] = None, every_s: Optional[float] = None,
                 **fields) -> None:
        level = level.upper()
        rank = LEVELS.index(level) if level in LEVELS else 0
        if self._minimal_trace() and rank < LEVELS.index('INFO'):
            return

        now = self._clock()
        if throttle_key and every_s is not None:
            last = self._last_emit.get(throttle_key)
            if last is not None and (now - last) < every_s:
                return
            self._last_emit[throttle_key] = now

        ts = time.strftime("%H:%M:%S", time.localtime(now)) + f".{int((now % 1) * 1000):03d}"
        line = f"[{ts}][TRACE][{component}][{level}] {message}"
        if fields:
            line += ' ' + ' '.join(f"{key}={value}" for key, value in fields.items())
        self._sink(line)

