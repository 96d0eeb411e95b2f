# timeline_engine/collector/event_logger.py - Buffered event ingestion
"""
Buffering, filtering and scoping front-end for timeline ingestion.
Converts log calls into batched Timeline insertions.
"""

import threading
from typing import Any, Callable, Dict, List, Optional, Set
import logging

from timeline_engine.collector.timeline import Timeline
from timeline_engine.utils.helpers import now_ms


def default_scheduler(delay_s: float, callback: Callable[[], None]):
    """
    Schedule a one-shot callback on a daemon timer thread.

    Args:
        delay_s: Delay in seconds
        callback: Function to call

    Returns:
        Handle with a cancel() method
    """
    timer = threading.Timer(delay_s, callback)
    timer.daemon = True
    timer.start()
    return timer


class EventLogger:
    """
    Buffers log entries and writes them to a timeline in batches.

    A batch is flushed when it reaches batch_size entries, or batch_timeout
    milliseconds after the first entry of the batch, whichever comes first.
    """

    def __init__(self, timeline: Optional[Timeline] = None, batch_size: int = 100,
                 batch_timeout: float = 100, clock: Callable[[], float] = now_ms,
                 scheduler: Callable = default_scheduler):
        """
        Initialize the event logger.

        Args:
            timeline: Timeline receiving flushed entries (a new one if omitted)
            batch_size: Entries per automatic flush
            batch_timeout: Deferred flush delay in milliseconds
            clock: Clock returning milliseconds
            scheduler: Callable (delay_s, callback) returning a cancellable handle
        """
        self.logger = logging.getLogger(__name__)

        if batch_size < 1:
            self.logger.warning(f"Invalid batch_size {batch_size}, using 1")
            batch_size = 1

        self.timeline = timeline if timeline is not None else Timeline(clock=clock)
        self.batch_size = batch_size
        self.batch_timeout = batch_timeout
        self.filters: Set[str] = set()
        self.batch: List[Dict[str, Any]] = []
        self.enabled = True

        self._clock = clock
        self._scheduler = scheduler
        self._batch_timer = None
        self._lock = threading.RLock()

    @property
    def timer_pending(self) -> bool:
        """Whether a deferred flush is armed"""
        return self._batch_timer is not None

    def log(self, event_type: str, name: str, data: Optional[Dict] = None) -> Optional[Dict]:
        """
        Log an event.

        Args:
            event_type: Event type tag
            name: Event name
            data: Optional event payload

        Returns:
            The buffered entry, or None if logging is disabled or the type is filtered
        """
        if not self.enabled or event_type in self.filters:
            return None

        entry = {
            'type': event_type,
            'name': name,
            'data': data if data is not None else {},
            'timestamp': self._clock(),
        }

        with self._lock:
            self.batch.append(entry)

            if len(self.batch) >= self.batch_size:
                self.flush()
            elif self._batch_timer is None:
                self._arm_timer()

        return entry

    def log_timed(self, event_type: str, name: str, fn: Callable[[], Any],
                  data: Optional[Dict] = None) -> Any:
        """
        Run a function and log how long it took.

        The exception raised by fn, if any, is logged and then re-raised.

        Args:
            event_type: Event type tag
            name: Event name
            fn: Zero-argument callable to time
            data: Optional extra payload

        Returns:
            Result of fn
        """
        return _run_timed(self, self._clock, event_type, name, fn, data)

    def scope(self, prefix: str) -> 'ScopedLogger':
        """
        Create a logger that prefixes names with '<prefix>:'.

        Args:
            prefix: Name prefix

        Returns:
            ScopedLogger sharing this logger's batch, timer and timeline
        """
        return ScopedLogger(self, prefix)

    def add_filter(self, event_type: str) -> 'EventLogger':
        """Suppress an event type"""
        self.filters.add(event_type)
        return self

    def remove_filter(self, event_type: str) -> 'EventLogger':
        """Stop suppressing an event type"""
        self.filters.discard(event_type)
        return self

    def _arm_timer(self):
        handle = None

        def on_timeout():
            self._on_timeout(handle)

        handle = self._scheduler(self.batch_timeout / 1000.0, on_timeout)
        self._batch_timer = handle

    def _on_timeout(self, handle):
        with self._lock:
            # A timer cancelled after it already fired belongs to an old batch
            if self._batch_timer is not handle:
                return
            self._batch_timer = None
            self.flush()

    def flush(self) -> int:
        """
        Write all buffered entries to the timeline.

        Returns:
            Number of entries flushed
        """
        with self._lock:
            if self._batch_timer is not None:
                self._batch_timer.cancel()
                self._batch_timer = None

            pending, self.batch = self.batch, []

            for entry in pending:
                self.timeline.add_event(entry)

        if pending:
            self.logger.debug(f"Flushed {len(pending)} entries to '{self.timeline.name}'")

        return len(pending)

    def set_enabled(self, enabled: bool) -> 'EventLogger':
        """
        Enable or disable logging. Disabling flushes pending entries.
        """
        self.enabled = enabled
        if not enabled:
            self.flush()
        return self


class ScopedLogger:
    """
    Name-prefixing view of an EventLogger.

    Holds a reference to the logger it was created from; batch, timer,
    filters and timeline all stay with that logger.
    """

    def __init__(self, parent, prefix: str):
        self._parent = parent
        self.prefix = prefix

    @property
    def root(self) -> EventLogger:
        """The EventLogger owning the shared state"""
        parent = self._parent
        while isinstance(parent, ScopedLogger):
            parent = parent._parent
        return parent

    @property
    def timeline(self) -> Timeline:
        return self.root.timeline

    @property
    def enabled(self) -> bool:
        return self.root.enabled

    @property
    def filters(self) -> Set[str]:
        return self.root.filters

    @property
    def batch(self) -> List[Dict[str, Any]]:
        return self.root.batch

    def log(self, event_type: str, name: str, data: Optional[Dict] = None) -> Optional[Dict]:
        return self._parent.log(event_type, f"{self.prefix}:{name}", data)

    def log_timed(self, event_type: str, name: str, fn: Callable[[], Any],
                  data: Optional[Dict] = None) -> Any:
        return _run_timed(self, self.root._clock, event_type, name, fn, data)

    def scope(self, prefix: str) -> 'ScopedLogger':
        return ScopedLogger(self, prefix)

    def add_filter(self, event_type: str) -> 'ScopedLogger':
        self.root.add_filter(event_type)
        return self

    def remove_filter(self, event_type: str) -> 'ScopedLogger':
        self.root.remove_filter(event_type)
        return self

    def flush(self) -> int:
        return self.root.flush()

    def set_enabled(self, enabled: bool) -> 'ScopedLogger':
        self.root.set_enabled(enabled)
        return self


def _run_timed(target, clock: Callable[[], float], event_type: str, name: str,
               fn: Callable[[], Any], data: Optional[Dict]) -> Any:
    data = data or {}
    start = clock()

    try:
        result = fn()
    except Exception as e:
        target.log(event_type, name, {
            **data,
            'duration': clock() - start,
            'success': False,
            'error': str(e),
        })
        raise

    target.log(event_type, name, {
        **data,
        'duration': clock() - start,
        'success': True,
    })

    return result
