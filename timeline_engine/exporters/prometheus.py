# timeline_engine/exporters/prometheus.py - Prometheus metrics exporter
"""
Exports timeline metrics in Prometheus format.
Provides an HTTP endpoint for Prometheus to scrape.
"""

from prometheus_client import CollectorRegistry, Counter, Histogram, Gauge, REGISTRY, generate_latest, start_http_server
from typing import Optional
import logging

from timeline_engine.collector.timeline import Timeline, EVENT_ADDED, TIMELINE_CLEARED


class PrometheusExporter:
    """
    Exports timeline metrics to Prometheus.

    Attach timelines to count incoming events by type, observe their
    durations and track how many events each timeline stores.
    """

    def __init__(self, port: int = 9090, registry: Optional[CollectorRegistry] = None):
        """
        Initialize the Prometheus exporter.

        Args:
            port: Port to expose metrics on
            registry: Registry to register metrics in (default: global registry)
        """
        self.port = port
        self.registry = registry if registry is not None else REGISTRY
        self.logger = logging.getLogger(__name__)

        self.event_count = Counter(
            'timeline_events_total',
            'Total number of events added to timelines',
            ['timeline', 'type'],
            registry=self.registry
        )

        self.event_duration = Histogram(
            'timeline_event_duration_milliseconds',
            'Duration of timeline events in milliseconds',
            ['timeline', 'type'],
            buckets=[1, 5, 10, 50, 100, 500, 1000, 5000],
            registry=self.registry
        )

        self.stored_events = Gauge(
            'timeline_stored_events',
            'Number of events currently stored',
            ['timeline'],
            registry=self.registry
        )

        self._attached = {}

        self.logger.info(f"Prometheus exporter initialized on port {port}")

    def start(self):
        """
        Start the Prometheus HTTP server.
        """
        try:
            start_http_server(self.port, registry=self.registry)
            self.logger.info(f"Prometheus metrics available at http://localhost:{self.port}/metrics")
        except OSError as e:
            self.logger.error(f"Failed to start Prometheus server: {e}")
            raise

    def attach(self, timeline: Timeline):
        """
        Subscribe to a timeline's notifications.

        Args:
            timeline: Timeline to observe
        """
        if id(timeline) in self._attached:
            return

        def on_added(event):
            self.record_event(timeline.name, event)
            self.stored_events.labels(timeline=timeline.name).set(len(timeline))

        def on_cleared(_):
            self.stored_events.labels(timeline=timeline.name).set(0)

        timeline.on(EVENT_ADDED, on_added)
        timeline.on(TIMELINE_CLEARED, on_cleared)
        self._attached[id(timeline)] = (timeline, on_added, on_cleared)

        self.stored_events.labels(timeline=timeline.name).set(len(timeline))

    def detach(self, timeline: Timeline):
        """
        Stop observing a timeline.

        Args:
            timeline: Previously attached timeline
        """
        entry = self._attached.pop(id(timeline), None)
        if entry is None:
            return

        _, on_added, on_cleared = entry
        timeline.off(EVENT_ADDED, on_added)
        timeline.off(TIMELINE_CLEARED, on_cleared)

    def record_event(self, timeline_name: str, event):
        """
        Record a single event.

        Args:
            timeline_name: Name of the timeline holding the event
            event: TimelineEvent
        """
        self.event_count.labels(timeline=timeline_name, type=event.type).inc()

        if event.duration > 0:
            self.event_duration.labels(timeline=timeline_name, type=event.type).observe(event.duration)

    def get_metrics_text(self) -> str:
        """
        Get current metrics in Prometheus text format.

        Returns:
            Metrics as text
        """
        return generate_latest(self.registry).decode('utf-8')
