# tests/test_event.py - Tests for the event model
"""
Unit tests for the TimelineEvent class.
"""

import pytest
from timeline_engine.collector.event import TimelineEvent


class TestTimelineEvent:
    """Test cases for TimelineEvent"""

    def test_defaults(self):
        """Test default field values"""
        event = TimelineEvent(timestamp=10)

        assert event.id
        assert event.type == 'generic'
        assert event.name == 'Event'
        assert event.duration == 0
        assert event.parent is None
        assert event.children == []
        assert event.tags == set()
        assert event.data == {}
        assert event.metadata == {}

    def test_generated_ids_are_unique(self):
        """Test that ids are generated when absent"""
        ids = {TimelineEvent(timestamp=0).id for _ in range(100)}
        assert len(ids) == 100

    def test_zero_timestamp_is_kept(self):
        """Test that a zero timestamp is not replaced by the clock"""
        event = TimelineEvent.from_dict({'timestamp': 0}, clock=lambda: 999)
        assert event.timestamp == 0

    def test_missing_timestamp_uses_clock(self):
        """Test that an absent timestamp is read from the clock"""
        event = TimelineEvent.from_dict({'type': 'x'}, clock=lambda: 42.5)
        assert event.timestamp == 42.5

    def test_end_time(self):
        """Test derived end time"""
        event = TimelineEvent(timestamp=100, duration=25)
        assert event.end_time == 125

    def test_negative_duration_is_clamped(self, caplog):
        """Test that negative durations are clamped with a warning"""
        event = TimelineEvent(timestamp=0, duration=-5)

        assert event.duration == 0
        assert event.end_time >= event.timestamp
        assert 'negative duration' in caplog.text

    def test_non_numeric_duration_is_clamped(self):
        """Test that non-numeric durations become zero"""
        event = TimelineEvent(timestamp=0, duration='long')
        assert event.duration == 0

    def test_tags_collapse_duplicates(self):
        """Test that tags behave as a set"""
        event = TimelineEvent.from_dict({'timestamp': 0, 'tags': ['a', 'b', 'a']})
        assert event.tags == {'a', 'b'}

    def test_overlaps(self):
        """Test interval overlap detection"""
        a = TimelineEvent(timestamp=0, duration=100)
        b = TimelineEvent(timestamp=50, duration=100)
        c = TimelineEvent(timestamp=100, duration=10)

        assert a.overlaps(b)
        assert b.overlaps(a)
        assert not a.overlaps(c)

    def test_add_child(self):
        """Test explicit child attachment"""
        parent = TimelineEvent(timestamp=0, duration=100)
        child = TimelineEvent(timestamp=10, duration=5)

        result = parent.add_child(child)

        assert result is parent
        assert parent.children == [child]
        assert child.parent == parent.id

    def test_to_dict_and_from_dict(self):
        """Test conversion to and from the serialized form"""
        event = TimelineEvent(
            id='evt-1', timestamp=5, type='network', name='fetch',
            data={'url': '/api'}, duration=12, parent='evt-0',
            tags={'slow', 'api'}, metadata={'source': 'test'}
        )

        serialized = event.to_dict()
        assert serialized == {
            'id': 'evt-1',
            'timestamp': 5,
            'type': 'network',
            'name': 'fetch',
            'data': {'url': '/api'},
            'duration': 12,
            'parent': 'evt-0',
            'tags': ['api', 'slow'],
            'metadata': {'source': 'test'},
        }

        restored = TimelineEvent.from_dict(serialized)
        assert restored.to_dict() == serialized
        assert restored is not event

    def test_events_compare_by_identity(self):
        """Test that two events with equal fields are distinct"""
        a = TimelineEvent(id='same', timestamp=0)
        b = TimelineEvent(id='same', timestamp=0)
        assert a != b
