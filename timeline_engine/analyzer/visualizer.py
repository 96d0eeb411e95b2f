# timeline_engine/analyzer/visualizer.py - Layout preparation
"""
Transforms event sequences into layout-ready structures for renderers:
swimlanes, flame graphs and histograms.
"""

from typing import Dict, List, Sequence
import logging


logger = logging.getLogger(__name__)


class TimelineVisualizer:
    """
    Stateless layout functions over event sequences.
    """

    @staticmethod
    def generate_swimlanes(events: Sequence) -> List[Dict]:
        """
        Split events into one lane per type.

        Args:
            events: Events to lay out

        Returns:
            List of {'name', 'events'} lanes in first-seen type order,
            each lane sorted by timestamp
        """
        lanes: Dict[str, List] = {}

        for event in events:
            lanes.setdefault(event.type, []).append(event)

        return [
            {'name': name, 'events': sorted(lane, key=lambda e: e.timestamp)}
            for name, lane in lanes.items()
        ]

    @staticmethod
    def generate_flame_graph(events: Sequence) -> Dict:
        """
        Build a flame graph tree from interval containment.

        Events with a positive duration are visited in timestamp order. An
        event becomes a child of the innermost open event whose interval
        [timestamp, timestamp + duration) contains its start. Explicit parent
        links are ignored. An event that starts inside another but ends after
        it is still nested under it.

        Args:
            events: Events to lay out

        Returns:
            Root node {'name': 'root', 'value': 0, 'children': [...]}; other
            nodes carry name, value, timestamp, duration and children
        """
        root = {'name': 'root', 'value': 0, 'children': []}
        stack = [root]

        timed = sorted((e for e in events if e.duration > 0), key=lambda e: e.timestamp)

        for event in timed:
            while len(stack) > 1:
                top = stack[-1]
                if top['timestamp'] + top['duration'] > event.timestamp:
                    break
                stack.pop()

            node = {
                'name': event.name,
                'value': event.duration,
                'timestamp': event.timestamp,
                'duration': event.duration,
                'children': [],
            }

            stack[-1]['children'].append(node)
            stack.append(node)

        return root

    @staticmethod
    def generate_histogram(values: Sequence[float], bin_count: int = 20) -> List[Dict]:
        """
        Bin values into equal-width bins over [min, max].

        Args:
            values: Numeric values
            bin_count: Number of bins

        Returns:
            List of {'start', 'end', 'count'} bins
        """
        if not values:
            return []

        if bin_count < 1:
            logger.warning(f"Invalid bin_count {bin_count}, no bins produced")
            return []

        low = min(values)
        high = max(values)
        bin_size = (high - low) / bin_count

        bins = [
            {'start': low + i * bin_size, 'end': low + (i + 1) * bin_size, 'count': 0}
            for i in range(bin_count)
        ]

        for value in values:
            if bin_size == 0:
                index = 0
            else:
                index = min(int((value - low) / bin_size), bin_count - 1)
            bins[index]['count'] += 1

        return bins
