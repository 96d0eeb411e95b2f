# timeline_engine/collector/monitor.py - Mark/measure performance timers
"""
Mark and measure timing facility backed by a private timeline.
"""

from typing import Any, Callable, Dict, List, Optional
import logging

from timeline_engine.collector.timeline import Timeline
from timeline_engine.errors import MissingMarkError
from timeline_engine.utils.helpers import now_ms


class PerformanceMonitor:
    """
    Records named marks and measures between them.

    Every mark and measure is also stored as an event on the monitor's own
    'Performance' timeline. That timeline is independent of any other; bridge
    it explicitly (e.g. with merge) if the events are needed elsewhere.
    """

    def __init__(self, clock: Callable[[], float] = now_ms, max_events: int = 10000):
        """
        Initialize the monitor.

        Args:
            clock: Clock returning milliseconds
            max_events: Capacity of the private timeline
        """
        self._clock = clock
        self.marks: Dict[str, Dict[str, Any]] = {}
        self.measures: Dict[str, Dict[str, Any]] = {}
        self._timeline = Timeline(name='Performance', max_events=max_events, clock=clock)

        self.logger = logging.getLogger(__name__)

    @property
    def timeline(self) -> Timeline:
        """The monitor's private timeline"""
        return self._timeline

    def mark(self, name: str, metadata: Optional[Dict] = None) -> float:
        """
        Record a point in time.

        Args:
            name: Mark name (overwrites an earlier mark of the same name)
            metadata: Optional metadata stored with the mark

        Returns:
            Timestamp of the mark
        """
        metadata = metadata or {}
        timestamp = self._clock()
        self.marks[name] = {'timestamp': timestamp, 'metadata': metadata}

        self._timeline.add_event({
            'type': 'mark',
            'name': name,
            'timestamp': timestamp,
            'data': metadata,
        })

        return timestamp

    def measure(self, name: str, start_mark: str, end_mark: Optional[str] = None) -> float:
        """
        Measure from a mark to another mark or to now.

        Args:
            name: Measure name
            start_mark: Name of a recorded mark
            end_mark: Optional end mark; now is used if missing or unknown

        Returns:
            Measured duration

        Raises:
            MissingMarkError: If start_mark was never recorded
        """
        start = self.marks.get(start_mark)
        if start is None:
            raise MissingMarkError(start_mark)

        if end_mark is not None and end_mark in self.marks:
            end_time = self.marks[end_mark]['timestamp']
        else:
            if end_mark is not None:
                self.logger.debug(f"End mark '{end_mark}' not found, measuring to now")
            end_time = self._clock()

        duration = end_time - start['timestamp']

        self.measures[name] = {
            'start': start['timestamp'],
            'end': end_time,
            'duration': duration,
            'start_mark': start_mark,
            'end_mark': end_mark,
        }

        self._timeline.add_event({
            'type': 'measure',
            'name': name,
            'timestamp': start['timestamp'],
            'duration': duration,
            'data': {'start_mark': start_mark, 'end_mark': end_mark},
        })

        return duration

    def start_timer(self, name: str, metadata: Optional[Dict] = None) -> Callable[[], float]:
        """
        Start a timer.

        The returned stop function may be called repeatedly; each call
        re-marks '<name>:end' and records a fresh measure from the original
        start mark.

        Args:
            name: Timer name
            metadata: Optional metadata stored with both marks

        Returns:
            Function that stops the timer and returns the duration
        """
        start_name = f"{name}:start"
        end_name = f"{name}:end"
        self.mark(start_name, metadata)

        def stop() -> float:
            self.mark(end_name, metadata)
            return self.measure(name, start_name, end_name)

        return stop

    def get_measures(self) -> List[Dict[str, Any]]:
        """
        Get all recorded measures.

        Returns:
            List of measure dictionaries including their name
        """
        return [{'name': name, **data} for name, data in self.measures.items()]

    def clear(self):
        """
        Clear all marks, measures and the private timeline.
        """
        self.marks.clear()
        self.measures.clear()
        self._timeline.clear()
