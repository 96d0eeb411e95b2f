# timeline_engine/utils/timeline_utils.py - Whole-timeline operations
"""
Merge, filter, snapshot and diff operations over timelines.
"""

from typing import Callable, Dict
import logging

from timeline_engine.collector.event import TimelineEvent
from timeline_engine.collector.timeline import Timeline
from timeline_engine.utils.helpers import now_ms


logger = logging.getLogger(__name__)


def merge(*timelines: Timeline, **options) -> Timeline:
    """
    Merge timelines into a new one.

    Events are added timeline by timeline in argument order. The merged
    timeline evicts as usual, so events may be dropped when the inputs hold
    more than its max_events.

    Args:
        *timelines: Timelines to merge
        **options: Keyword arguments for the new Timeline

    Returns:
        New Timeline holding the (shared) event objects
    """
    merged = Timeline(**options)

    for timeline in timelines:
        for event in timeline.get_events():
            merged.add_event(event)

    logger.debug(f"Merged {len(timelines)} timelines into {len(merged)} events")
    return merged


def filter_timeline(timeline: Timeline, predicate: Callable[[TimelineEvent], bool]) -> Timeline:
    """
    Copy the events matching a predicate into a new timeline.

    Args:
        timeline: Source timeline
        predicate: Function returning True for events to keep

    Returns:
        New Timeline named '<name> (filtered)'
    """
    filtered = Timeline(name=f"{timeline.name} (filtered)")

    for event in timeline.get_events():
        if predicate(event):
            filtered.add_event(event)

    return filtered


def snapshot(timeline: Timeline, clock: Callable[[], float] = now_ms) -> Dict:
    """
    Capture the current state of a timeline.

    Args:
        timeline: Timeline to capture
        clock: Clock for the snapshot timestamp

    Returns:
        Dictionary with timestamp, stats, event_count and exported data
    """
    return {
        'timestamp': clock(),
        'stats': timeline.get_stats(),
        'event_count': len(timeline),
        'data': timeline.export(),
    }


def diff(snapshot1: Dict, snapshot2: Dict) -> Dict:
    """
    Compare two snapshots.

    Args:
        snapshot1: Earlier snapshot
        snapshot2: Later snapshot

    Returns:
        Dictionary with time_diff, events_diff and the serialized events of
        snapshot2 whose id is absent from snapshot1
    """
    known_ids = {event['id'] for event in snapshot1['data']['events']}

    return {
        'time_diff': snapshot2['timestamp'] - snapshot1['timestamp'],
        'events_diff': snapshot2['event_count'] - snapshot1['event_count'],
        'new_events': [
            event for event in snapshot2['data']['events']
            if event['id'] not in known_ids
        ],
    }
