# timeline_engine/utils/__init__.py - Utilities module
"""
Utility functions and helpers.

This module provides:
- config.py: Configuration management
- logger.py: Logging setup
- helpers.py: Clock, identifiers and time formatting
- timeline_utils.py: Merge, filter, snapshot and diff of timelines
"""
