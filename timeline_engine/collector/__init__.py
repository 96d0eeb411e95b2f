# timeline_engine/collector/__init__.py - Event collection module
"""
Collector module for storing and ingesting timeline events.

This module provides:
- event.py: The TimelineEvent record
- timeline.py: Bounded, evicting event store with pub/sub
- event_logger.py: Buffered, filtered ingestion front-end
- monitor.py: Mark/measure performance timers
"""
