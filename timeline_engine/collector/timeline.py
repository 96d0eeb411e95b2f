# timeline_engine/collector/timeline.py - Bounded event store
"""
Bounded, capacity-evicting store of timeline events.

The store keeps events in insertion order and evicts the event with the
smallest timestamp once capacity is reached. A min-heap keyed by
(timestamp, insertion sequence) keeps eviction logarithmic; entries whose
event is no longer stored are discarded lazily when they reach the top.
"""

import heapq
import threading
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Set, Tuple, Union
import logging

from timeline_engine.collector.event import TimelineEvent
from timeline_engine.utils.helpers import now_ms


EVENT_ADDED = 'event:added'
TIMELINE_CLEARED = 'timeline:cleared'

DEFAULT_MAX_EVENTS = 10000

Listener = Callable[[Any], None]


class Timeline:
    """
    Bounded store of events with range/type queries and a synchronous
    publish/subscribe channel.

    Subscribers are kept per channel in subscription order. Dispatch works on
    a copy of the subscriber list, so a callback that subscribes or
    unsubscribes only affects later emissions.
    """

    def __init__(self, name: str = 'Timeline', max_events: int = DEFAULT_MAX_EVENTS,
                 start_time: Optional[float] = None, clock: Callable[[], float] = now_ms):
        """
        Initialize an empty timeline.

        Args:
            name: Timeline name
            max_events: Capacity bound
            start_time: Reference time of the timeline (default: now)
            clock: Clock used for default timestamps
        """
        self.logger = logging.getLogger(__name__)

        if not isinstance(max_events, int) or max_events < 1:
            self.logger.warning(
                f"Invalid max_events {max_events!r}, using {DEFAULT_MAX_EVENTS}"
            )
            max_events = DEFAULT_MAX_EVENTS

        self.name = name
        self.max_events = max_events
        self.start_time = start_time if start_time is not None else clock()

        self.events: Dict[str, TimelineEvent] = {}
        self.event_types: Set[str] = set()

        self._clock = clock
        self._listeners: Dict[str, List[Listener]] = {}
        self._index: List[Tuple[float, int, TimelineEvent]] = []
        self._sequence = 0
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[TimelineEvent]:
        return iter(self._snapshot())

    def __contains__(self, event_id) -> bool:
        return event_id in self.events

    def __repr__(self):
        return f"Timeline(name={self.name!r}, events={len(self.events)}, max_events={self.max_events})"

    def add_event(self, data: Union[TimelineEvent, Mapping[str, Any]]) -> TimelineEvent:
        """
        Add an event, evicting the earliest one when at capacity.

        Args:
            data: TimelineEvent or mapping of event fields

        Returns:
            The stored TimelineEvent
        """
        if isinstance(data, TimelineEvent):
            event = data
        else:
            event = TimelineEvent.from_dict(data, clock=self._clock)

        with self._lock:
            if len(self.events) >= self.max_events:
                self._evict_earliest()

            self.events[event.id] = event
            self._sequence += 1
            heapq.heappush(self._index, (event.timestamp, self._sequence, event))
            self.event_types.add(event.type)

            if len(self._index) > 2 * len(self.events) + 64:
                self._compact_index()

        self._emit(EVENT_ADDED, event)
        return event

    def _evict_earliest(self) -> Optional[TimelineEvent]:
        """Remove the stored event with the smallest timestamp"""
        while self._index:
            _, _, candidate = heapq.heappop(self._index)
            if self.events.get(candidate.id) is candidate:
                del self.events[candidate.id]
                self.logger.debug(
                    f"Evicted event {candidate.id} ({candidate.type}@{candidate.timestamp}) "
                    f"from '{self.name}'"
                )
                return candidate

        return None

    def _compact_index(self):
        """Drop heap entries whose event is no longer stored"""
        self._index = [
            entry for entry in self._index
            if self.events.get(entry[2].id) is entry[2]
        ]
        heapq.heapify(self._index)

    def _snapshot(self) -> List[TimelineEvent]:
        with self._lock:
            return list(self.events.values())

    def get_events(self) -> List[TimelineEvent]:
        """
        Get all stored events in insertion order.

        Returns:
            List of events
        """
        return self._snapshot()

    def get_event(self, event_id: str) -> Optional[TimelineEvent]:
        """Look up a stored event by id"""
        return self.events.get(event_id)

    def get_events_in_range(self, start: float, end: float) -> List[TimelineEvent]:
        """
        Get events whose interval intersects [start, end].

        Args:
            start: Range start (inclusive)
            end: Range end (inclusive)

        Returns:
            Matching events sorted by timestamp
        """
        matching = [
            event for event in self._snapshot()
            if event.timestamp <= end and event.end_time >= start
        ]
        return sorted(matching, key=lambda e: e.timestamp)

    def get_events_by_type(self, event_type: str) -> List[TimelineEvent]:
        """
        Get events of one type.

        Args:
            event_type: Type tag to match

        Returns:
            Matching events sorted by timestamp
        """
        matching = [event for event in self._snapshot() if event.type == event_type]
        return sorted(matching, key=lambda e: e.timestamp)

    def get_total_duration(self) -> float:
        """
        Get the span from the earliest start to the latest end.

        Returns:
            Total duration, 0 when empty
        """
        events = self._snapshot()
        if not events:
            return 0

        return max(e.end_time for e in events) - min(e.timestamp for e in events)

    def get_stats(self) -> Optional[Dict]:
        """
        Get timeline statistics.

        Returns:
            Dictionary with statistics or None if the timeline is empty
        """
        events = self._snapshot()
        if not events:
            return None

        start = min(e.timestamp for e in events)
        end = max(e.end_time for e in events)
        durations = [e.duration for e in events if e.duration > 0]

        return {
            'event_count': len(events),
            'time_range': {'start': start, 'end': end},
            'event_types': sorted(self.event_types),
            'average_duration': sum(durations) / len(durations) if durations else 0,
            'total_duration': end - start,
        }

    def clear(self):
        """
        Remove all events and known types.
        """
        with self._lock:
            self.events.clear()
            self.event_types.clear()
            self._index = []

        self._emit(TIMELINE_CLEARED, None)

    def on(self, channel: str, callback: Listener) -> 'Timeline':
        """
        Subscribe a callback to a channel.

        Args:
            channel: Channel name ('event:added', 'timeline:cleared')
            callback: Function called with the channel payload

        Returns:
            This timeline, for chaining
        """
        callbacks = self._listeners.setdefault(channel, [])
        if callback not in callbacks:
            callbacks.append(callback)
        return self

    def off(self, channel: str, callback: Listener) -> 'Timeline':
        """
        Unsubscribe a callback from a channel.

        Returns:
            This timeline, for chaining
        """
        callbacks = self._listeners.get(channel)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)
        return self

    def _emit(self, channel: str, payload: Any = None):
        for callback in list(self._listeners.get(channel, ())):
            try:
                callback(payload)
            except Exception as e:
                self.logger.error(f"Listener for '{channel}' on '{self.name}' failed: {e}")

    def export(self) -> Dict:
        """
        Export the timeline in its serialized form.

        Returns:
            Dictionary with name, startTime and serialized events
        """
        return {
            'name': self.name,
            'startTime': self.start_time,
            'events': [event.to_dict() for event in self._snapshot()],
        }

    def import_data(self, data: Mapping[str, Any]) -> 'Timeline':
        """
        Replace the contents with a previously exported timeline.

        Events are re-added in array order, so capacity eviction applies when
        the export holds more than max_events events.

        Args:
            data: Dictionary in the export() format

        Returns:
            This timeline, for chaining
        """
        self.clear()

        if data.get('name'):
            self.name = data['name']
        if data.get('startTime') is not None:
            self.start_time = data['startTime']

        events = data.get('events') or []
        for event_data in events:
            self.add_event(TimelineEvent.from_dict(event_data, clock=self._clock))

        if len(events) > self.max_events:
            self.logger.info(
                f"Imported {len(events)} events into '{self.name}', "
                f"{len(events) - len(self.events)} dropped by capacity"
            )

        return self
