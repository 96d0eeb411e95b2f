# timeline_engine/__init__.py - Timeline engine package
"""
In-process event timeline engine.

Events are stored in a bounded Timeline, fed directly, through an
EventLogger or through a PerformanceMonitor, and analyzed with the
stateless TimelineAnalyzer and TimelineVisualizer.
"""

from timeline_engine.collector.event import TimelineEvent
from timeline_engine.collector.timeline import Timeline
from timeline_engine.collector.monitor import PerformanceMonitor
from timeline_engine.collector.event_logger import EventLogger, ScopedLogger
from timeline_engine.analyzer.timeline_analyzer import TimelineAnalyzer
from timeline_engine.analyzer.visualizer import TimelineVisualizer
from timeline_engine.errors import TimelineEngineError, MissingMarkError, ConfigError

__version__ = "0.1.0"

__all__ = [
    "TimelineEvent",
    "Timeline",
    "PerformanceMonitor",
    "EventLogger",
    "ScopedLogger",
    "TimelineAnalyzer",
    "TimelineVisualizer",
    "TimelineEngineError",
    "MissingMarkError",
    "ConfigError",
]
