# tests/test_visualizer.py - Tests for layout helpers
"""
Unit tests for the TimelineVisualizer class.
"""

import pytest
from timeline_engine.analyzer.visualizer import TimelineVisualizer
from timeline_engine.collector.event import TimelineEvent


def event(name, timestamp, duration=0, type='call'):
    return TimelineEvent(name=name, timestamp=timestamp, duration=duration, type=type)


class TestSwimlanes:
    """Test cases for generate_swimlanes"""

    def test_lanes_by_type(self):
        """Test lane order and per-lane sorting"""
        events = [
            event('r2', 30, type='render'),
            event('n1', 10, type='network'),
            event('r1', 20, type='render'),
        ]

        lanes = TimelineVisualizer.generate_swimlanes(events)

        assert [lane['name'] for lane in lanes] == ['render', 'network']
        assert [e.name for e in lanes[0]['events']] == ['r1', 'r2']

    def test_empty(self):
        """Test empty input"""
        assert TimelineVisualizer.generate_swimlanes([]) == []


class TestFlameGraph:
    """Test cases for generate_flame_graph"""

    def test_nesting_by_containment(self):
        """Test call-stack reconstruction"""
        events = [
            event('main', 0, 100),
            event('parse', 10, 30),
            event('tokenize', 15, 5),
            event('render', 50, 40),
            event('instant', 60, 0),
        ]

        root = TimelineVisualizer.generate_flame_graph(events)

        assert root['name'] == 'root'
        assert root['value'] == 0
        assert [n['name'] for n in root['children']] == ['main']

        main = root['children'][0]
        assert [n['name'] for n in main['children']] == ['parse', 'render']
        assert [n['name'] for n in main['children'][0]['children']] == ['tokenize']
        assert main['value'] == 100

    def test_sibling_roots(self):
        """Test that disjoint events are siblings"""
        events = [event('b', 100, 10), event('a', 0, 10)]

        root = TimelineVisualizer.generate_flame_graph(events)

        assert [n['name'] for n in root['children']] == ['a', 'b']

    def test_adjacent_interval_is_not_contained(self):
        """Test the half-open interval end"""
        events = [event('a', 0, 10), event('b', 10, 10)]

        root = TimelineVisualizer.generate_flame_graph(events)

        assert [n['name'] for n in root['children']] == ['a', 'b']

    def test_overlapping_interval_nests_under_open_event(self):
        """Test attachment of partially overlapping intervals"""
        events = [event('a', 0, 10), event('b', 5, 20)]

        root = TimelineVisualizer.generate_flame_graph(events)

        assert root['children'][0]['children'][0]['name'] == 'b'


class TestHistogram:
    """Test cases for generate_histogram"""

    def test_empty(self):
        """Test empty input"""
        assert TimelineVisualizer.generate_histogram([]) == []

    def test_equal_width_bins(self):
        """Test bin edges and counts"""
        bins = TimelineVisualizer.generate_histogram([0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10], bin_count=5)

        assert len(bins) == 5
        assert bins[0]['start'] == 0
        assert bins[-1]['end'] == pytest.approx(10)
        assert [b['count'] for b in bins] == [2, 2, 2, 2, 3]

    def test_max_value_in_last_bin(self):
        """Test that the maximum lands in the last bin"""
        bins = TimelineVisualizer.generate_histogram([0, 100], bin_count=4)

        assert bins[-1]['count'] == 1
        assert sum(b['count'] for b in bins) == 2

    def test_identical_values(self):
        """Test zero-width range"""
        bins = TimelineVisualizer.generate_histogram([5, 5, 5], bin_count=3)

        assert bins[0]['count'] == 3
        assert sum(b['count'] for b in bins) == 3

    def test_invalid_bin_count(self):
        """Test non-positive bin count"""
        assert TimelineVisualizer.generate_histogram([1, 2], bin_count=0) == []
