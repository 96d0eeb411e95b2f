# timeline_engine/analyzer/timeline_analyzer.py - Event aggregation and analysis
"""
Aggregates, frequency buckets, percentiles and co-occurrence patterns
computed over sequences of timeline events.
"""

from bisect import bisect_left
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Sequence
import logging


logger = logging.getLogger(__name__)


class TimelineAnalyzer:
    """
    Stateless analysis functions over event sequences.

    None of the methods mutate their input.
    """

    @staticmethod
    def group_by(events: Iterable, property: str) -> Dict[Any, List]:
        """
        Group events by type or by a key of their data.

        Args:
            events: Events to group
            property: 'type', or a key looked up in each event's data

        Returns:
            Dictionary mapping group keys to events, in first-seen key order.
            Events without the data key are grouped under None.
        """
        groups: Dict[Any, List] = {}
        missing = 0

        for event in events:
            if property == 'type':
                key = event.type
            else:
                if property not in event.data:
                    missing += 1
                key = event.data.get(property)

            groups.setdefault(key, []).append(event)

        if missing:
            logger.debug(f"{missing} events have no data key '{property}', grouped under None")

        return groups

    @staticmethod
    def calculate_frequency(events: Sequence, bucket_size: float = 1000) -> List[Dict]:
        """
        Count events in fixed-width time buckets.

        Buckets start at the earliest timestamp; the last bucket may extend
        past the latest one.

        Args:
            events: Events to count
            bucket_size: Bucket width in milliseconds

        Returns:
            List of {'time', 'count', 'rate'} dictionaries, rate in events per second
        """
        if not events:
            return []

        if bucket_size <= 0:
            logger.warning(f"Invalid bucket_size {bucket_size}, no buckets produced")
            return []

        timestamps = sorted(e.timestamp for e in events)
        min_time = timestamps[0]
        max_time = timestamps[-1]

        buckets = []
        index = 0
        while True:
            time = min_time + index * bucket_size
            if time > max_time:
                break

            count = (bisect_left(timestamps, time + bucket_size)
                     - bisect_left(timestamps, time))

            buckets.append({
                'time': time,
                'count': count,
                'rate': count / (bucket_size / 1000),
            })
            index += 1

        return buckets

    @staticmethod
    def find_patterns(events: Sequence, min_support: int = 2, max_gap: float = 1000,
                      assume_sorted: bool = False) -> List[Dict]:
        """
        Find ordered type pairs that occur within max_gap of each other.

        Every pair (i, j) with i < j and a timestamp gap of at most max_gap
        counts once towards the pattern '<type_i>-><type_j>'. The scan for
        each i stops at the first event beyond max_gap, which requires events
        in ascending timestamp order: the input is sorted first unless
        assume_sorted is set.

        Args:
            events: Events to mine
            min_support: Minimum occurrences for a pattern to be reported
            max_gap: Maximum timestamp gap between the two events of a pair
            assume_sorted: Skip sorting when the caller guarantees order

        Returns:
            List of {'pattern', 'count'} dictionaries, most frequent first
        """
        if not assume_sorted:
            events = sorted(events, key=lambda e: e.timestamp)

        patterns: Dict[str, int] = defaultdict(int)

        for i in range(len(events) - 1):
            first = events[i]
            for j in range(i + 1, len(events)):
                second = events[j]
                if second.timestamp - first.timestamp > max_gap:
                    break

                patterns[f"{first.type}->{second.type}"] += 1

        result = [
            {'pattern': pattern, 'count': count}
            for pattern, count in patterns.items()
            if count >= min_support
        ]
        result.sort(key=lambda x: x['count'], reverse=True)

        return result

    @staticmethod
    def calculate_metrics(events: Sequence) -> Dict:
        """
        Compute duration metrics over events with a positive duration.

        Args:
            events: Events to measure

        Returns:
            {'count'} when no event has a duration, otherwise
            {'count', 'sum', 'avg', 'min', 'max', 'p50', 'p95', 'p99'}.
            'count' is the number of input events.
        """
        durations = sorted(e.duration for e in events if e.duration > 0)

        if not durations:
            return {'count': len(events)}

        total = sum(durations)

        return {
            'count': len(events),
            'sum': total,
            'avg': total / len(durations),
            'min': durations[0],
            'max': durations[-1],
            'p50': TimelineAnalyzer.percentile(durations, 0.50),
            'p95': TimelineAnalyzer.percentile(durations, 0.95),
            'p99': TimelineAnalyzer.percentile(durations, 0.99),
        }

    @staticmethod
    def percentile(sorted_data: Sequence[float], percentile: float) -> float:
        """
        Nearest-rank percentile without interpolation.

        Args:
            sorted_data: Values in ascending order
            percentile: Percentile to calculate (0.0-1.0)

        Returns:
            Value at index floor(n * percentile), clamped to the valid range
        """
        n = len(sorted_data)
        if n == 0:
            return 0.0

        index = min(max(int(n * percentile), 0), n - 1)
        return sorted_data[index]
