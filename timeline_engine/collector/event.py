# timeline_engine/collector/event.py - Timeline event model
"""
Structured representation of a single timeline occurrence.
"""

from dataclasses import dataclass, field
from numbers import Number
from typing import Any, Callable, Dict, List, Mapping, Optional, Set
import logging

from timeline_engine.utils.helpers import generate_event_id, now_ms


logger = logging.getLogger(__name__)


@dataclass(eq=False)
class TimelineEvent:
    """
    One timestamped occurrence with an optional duration.

    Events are compared by identity. `parent` holds the id of a logically
    enclosing event, never the event itself.
    """
    id: Optional[str] = None
    timestamp: Optional[float] = None
    type: str = 'generic'
    name: str = 'Event'
    data: Dict[str, Any] = field(default_factory=dict)
    duration: float = 0
    parent: Optional[str] = None
    children: List['TimelineEvent'] = field(default_factory=list)
    tags: Set[str] = field(default_factory=set)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.id is None:
            self.id = generate_event_id()
        if self.timestamp is None:
            self.timestamp = now_ms()
        if self.data is None:
            self.data = {}
        if self.metadata is None:
            self.metadata = {}
        self.tags = set(self.tags or ())
        self.duration = self._validate_duration(self.duration)

    def _validate_duration(self, duration) -> float:
        if duration is None:
            return 0
        if isinstance(duration, bool) or not isinstance(duration, Number):
            logger.warning(f"Event {self.id} has non-numeric duration {duration!r}, using 0")
            return 0
        if duration < 0:
            logger.warning(f"Event {self.id} has negative duration {duration}, clamping to 0")
            return 0
        return duration

    @property
    def end_time(self) -> float:
        """End of the event interval"""
        return self.timestamp + self.duration

    def overlaps(self, other: 'TimelineEvent') -> bool:
        """Check whether the two intervals overlap"""
        return self.timestamp < other.end_time and self.end_time > other.timestamp

    def add_child(self, event: 'TimelineEvent') -> 'TimelineEvent':
        """
        Attach an event as an explicit child of this one.

        Args:
            event: Child event, its parent is set to this event's id

        Returns:
            This event, for chaining
        """
        self.children.append(event)
        event.parent = self.id
        return self

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the serialized form used by exports.

        Returns:
            Plain dictionary (children are not serialized)
        """
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'type': self.type,
            'name': self.name,
            'data': self.data,
            'duration': self.duration,
            'parent': self.parent,
            'tags': sorted(self.tags),
            'metadata': self.metadata,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any],
                  clock: Callable[[], float] = now_ms) -> 'TimelineEvent':
        """
        Build an event from a serialized or raw ingestion payload.

        Args:
            data: Mapping with any of the event fields
            clock: Clock used when no timestamp is supplied

        Returns:
            New TimelineEvent
        """
        timestamp = data.get('timestamp')
        if timestamp is None:
            timestamp = clock()

        return cls(
            id=data.get('id'),
            timestamp=timestamp,
            type=data.get('type') or 'generic',
            name=data.get('name') or 'Event',
            data=dict(data.get('data') or {}),
            duration=data.get('duration', 0),
            parent=data.get('parent'),
            tags=set(data.get('tags') or ()),
            metadata=dict(data.get('metadata') or {}),
        )
