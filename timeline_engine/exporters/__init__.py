# timeline_engine/exporters/__init__.py - Exporters module
"""
Exporters for outputting timelines and analysis results.

This module provides:
- json_exporter.py: JSON files, including timeline export/import
- stdout.py: Console output
- prometheus.py: Prometheus metrics exporter
"""
