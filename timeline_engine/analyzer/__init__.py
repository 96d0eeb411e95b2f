# timeline_engine/analyzer/__init__.py - Analysis module
"""
Analyzer module for processing collected events.

This module provides:
- timeline_analyzer.py: Grouping, frequency, patterns and percentile metrics
- visualizer.py: Swimlane, flame graph and histogram layouts
"""
