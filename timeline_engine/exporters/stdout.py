# timeline_engine/exporters/stdout.py - Console output exporter
"""
Prints timeline statistics and analysis results in human-readable form.
"""

from typing import Dict, List, Optional
from colorama import Fore, Style, init
import logging

from timeline_engine.utils.helpers import format_duration, format_time


# Initialize colorama
init(autoreset=True)


class StdoutExporter:
    """
    Prints timeline results to stdout with colored output.
    """

    def __init__(self, use_colors: bool = True, slow_threshold_ms: float = 100,
                 very_slow_threshold_ms: float = 1000):
        """
        Initialize the stdout exporter.

        Args:
            use_colors: Whether to use colored output
            slow_threshold_ms: Durations above this are printed in yellow
            very_slow_threshold_ms: Durations above this are printed in red
        """
        self.use_colors = use_colors
        self.slow_threshold_ms = slow_threshold_ms
        self.very_slow_threshold_ms = very_slow_threshold_ms
        self.logger = logging.getLogger(__name__)

    def _color(self, code: str) -> str:
        return code if self.use_colors else ""

    def _reset(self) -> str:
        return Style.RESET_ALL if self.use_colors else ""

    def _header(self, title: str):
        cyan = self._color(Fore.CYAN)
        print(f"\n{cyan}{'='*80}{self._reset()}")
        print(f"{cyan}{title}{self._reset()}")
        print(f"{cyan}{'='*80}{self._reset()}\n")

    def print_event(self, event):
        """
        Print a single event.

        Args:
            event: TimelineEvent
        """
        color = self._get_color_for_duration(event.duration)

        print(f"{color}[{event.type:12}] "
              f"{event.name:30} "
              f"at={event.timestamp:12.2f} "
              f"duration={format_time(event.duration):>10}{self._reset()}")

    def print_events(self, events: List, limit: int = 50):
        """
        Print multiple events.

        Args:
            events: List of TimelineEvent objects
            limit: Maximum number of events to print
        """
        self._header(f"Events (showing {min(len(events), limit)} of {len(events)})")

        for event in events[:limit]:
            self.print_event(event)

        if len(events) > limit:
            print(f"\n{self._color(Fore.YELLOW)}... and {len(events) - limit} more events{self._reset()}")

    def print_stats(self, stats: Optional[Dict], name: str = 'Timeline'):
        """
        Print timeline statistics.

        Args:
            stats: Result of Timeline.get_stats() (None for an empty timeline)
            name: Timeline name shown in the header
        """
        self._header(f"Statistics: {name}")

        if not stats:
            print(f"{self._color(Fore.YELLOW)}Timeline is empty{self._reset()}\n")
            return

        yellow = self._color(Fore.YELLOW)
        print(f"{yellow}Summary:{self._reset()}")
        print(f"  Events: {stats['event_count']}")
        print(f"  Types: {', '.join(stats['event_types'])}")
        time_range = stats['time_range']
        print(f"  Time Range: {time_range['start']:.2f} - {time_range['end']:.2f} "
              f"({format_duration(time_range['start'], time_range['end'])})")
        print(f"  Total Duration: {format_time(stats['total_duration'])}")
        print(f"  Average Duration: {format_time(stats['average_duration'])}")
        print()

    def print_metrics(self, metrics: Dict):
        """
        Print duration metrics.

        Args:
            metrics: Result of TimelineAnalyzer.calculate_metrics()
        """
        self._header("Duration Metrics")

        print(f"  Count: {metrics.get('count', 0)}")
        if 'sum' not in metrics:
            print("  No events with a duration")
            print()
            return

        for key in ('sum', 'avg', 'min', 'max', 'p50', 'p95', 'p99'):
            value = metrics[key]
            color = self._get_color_for_duration(value)
            print(f"  {key.upper():<6}{color}{format_time(value):>12}{self._reset()}")
        print()

    def print_patterns(self, patterns: List[Dict], limit: int = 10):
        """
        Print event patterns.

        Args:
            patterns: Result of TimelineAnalyzer.find_patterns()
            limit: Maximum number of patterns to print
        """
        if not patterns:
            return

        self._header("Event Patterns")

        print(f"{'Rank':<6} {'Pattern':<50} {'Count':<8}")
        print(f"{'-'*80}")

        for i, pattern in enumerate(patterns[:limit], 1):
            print(f"{i:<6} {pattern['pattern']:<50} {pattern['count']:<8}")

    def print_swimlanes(self, lanes: List[Dict]):
        """
        Print a per-type lane summary.

        Args:
            lanes: Result of TimelineVisualizer.generate_swimlanes()
        """
        if not lanes:
            return

        self._header("Swimlanes")

        for lane in lanes:
            events = lane['events']
            first = events[0].timestamp
            last = max(e.end_time for e in events)
            print(f"{self._color(Fore.GREEN)}{lane['name']:<20}{self._reset()} "
                  f"{len(events):>6} events  "
                  f"span {format_time(last - first)}")
        print()

    def print_frequency(self, buckets: List[Dict], width: int = 50):
        """
        Print frequency buckets as a bar chart.

        Args:
            buckets: Result of TimelineAnalyzer.calculate_frequency()
            width: Width of the longest bar
        """
        if not buckets:
            return

        self._header("Event Frequency")

        peak = max(bucket['count'] for bucket in buckets) or 1
        for bucket in buckets:
            bar = '#' * int(round(bucket['count'] / peak * width))
            print(f"{bucket['time']:>12.2f} {bucket['count']:>6} {bucket['rate']:>10.2f}/s "
                  f"{self._color(Fore.GREEN)}{bar}{self._reset()}")
        print()

    def print_histogram(self, bins: List[Dict], width: int = 50):
        """
        Print duration histogram bins as a bar chart.

        Args:
            bins: Result of TimelineVisualizer.generate_histogram()
            width: Width of the longest bar
        """
        self._header("Duration Histogram")

        if not bins:
            print("  No values to plot")
            print()
            return

        peak = max(b['count'] for b in bins) or 1
        for b in bins:
            bar = '#' * int(round(b['count'] / peak * width))
            label = f"{format_time(b['start'])} - {format_time(b['end'])}"
            print(f"  {label:>24} {b['count']:>6} "
                  f"{self._get_color_for_duration(b['end'])}{bar}{self._reset()}")
        print()

    def _get_color_for_duration(self, duration_ms: float) -> str:
        """
        Get color based on duration thresholds.

        Args:
            duration_ms: Duration in milliseconds

        Returns:
            Color code
        """
        if not self.use_colors:
            return ""

        if duration_ms > self.very_slow_threshold_ms:
            return Fore.RED
        elif duration_ms > self.slow_threshold_ms:
            return Fore.YELLOW
        else:
            return Fore.GREEN
