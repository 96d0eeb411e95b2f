# tests/test_exporters.py - Tests for exporters
"""
Unit tests for the JSON, stdout and Prometheus exporters.
"""

import json

import pytest
from prometheus_client import CollectorRegistry

from timeline_engine.analyzer.timeline_analyzer import TimelineAnalyzer
from timeline_engine.analyzer.visualizer import TimelineVisualizer
from timeline_engine.collector.timeline import Timeline
from timeline_engine.exporters.json_exporter import JSONExporter
from timeline_engine.exporters.prometheus import PrometheusExporter
from timeline_engine.exporters.stdout import StdoutExporter


@pytest.fixture
def timeline():
    timeline = Timeline(name='sample', start_time=0, clock=lambda: 0)
    timeline.add_event({'id': 'a', 'type': 'network', 'name': 'fetch', 'timestamp': 0, 'duration': 120})
    timeline.add_event({'id': 'b', 'type': 'render', 'name': 'paint', 'timestamp': 50, 'duration': 20})
    timeline.add_event({'id': 'c', 'type': 'network', 'name': 'fetch', 'timestamp': 300})
    return timeline


class TestJSONExporter:
    """Test cases for JSONExporter"""

    def test_export_and_load_timeline(self, tmp_path, timeline):
        """Test writing and reading a timeline file"""
        exporter = JSONExporter(str(tmp_path))

        path = exporter.export_timeline(timeline, 'timeline.json')
        loaded = exporter.load_timeline(path)

        with open(path) as f:
            assert json.load(f) == timeline.export()

        assert loaded.name == 'sample'
        assert list(loaded.events) == ['a', 'b', 'c']
        assert loaded.export() == timeline.export()

    def test_load_with_capacity(self, tmp_path, timeline):
        """Test loading into a smaller timeline"""
        exporter = JSONExporter(str(tmp_path))
        path = exporter.export_timeline(timeline, 'timeline.json')

        loaded = exporter.load_timeline(path, max_events=2)

        assert set(loaded.events) == {'b', 'c'}

    def test_generated_filename(self, tmp_path, timeline):
        """Test auto-generated file names"""
        path = JSONExporter(str(tmp_path)).export_timeline(timeline)
        assert path.endswith('.json')
        assert 'timeline_' in path

    def test_export_analysis(self, tmp_path):
        """Test writing analysis results"""
        path = JSONExporter(str(tmp_path)).export_analysis({'metrics': {'count': 1}}, 'a.json')

        with open(path) as f:
            data = json.load(f)

        assert data['analysis'] == {'metrics': {'count': 1}}
        assert 'timestamp' in data

    def test_export_snapshot(self, tmp_path, timeline):
        """Test writing a snapshot"""
        from timeline_engine.utils.timeline_utils import snapshot

        path = JSONExporter(str(tmp_path)).export_snapshot(snapshot(timeline), 's.json')

        with open(path) as f:
            assert json.load(f)['event_count'] == 3

    def test_loading_creates_no_directory(self, tmp_path, timeline):
        """Test that an exporter only creates its directory when writing"""
        path = JSONExporter(str(tmp_path)).export_timeline(timeline, 'timeline.json')
        output_dir = tmp_path / 'out'

        exporter = JSONExporter(str(output_dir))
        exporter.load_timeline(path)
        assert not output_dir.exists()

        exporter.export_timeline(timeline, 'copy.json')
        assert (output_dir / 'copy.json').exists()

    def test_load_rejects_non_object(self, tmp_path):
        """Test a JSON file that is not an object"""
        path = tmp_path / 'list.json'
        path.write_text('[]')

        with pytest.raises(ValueError):
            JSONExporter(str(tmp_path)).load_timeline(str(path))

    def test_unencodable_data_raises(self, tmp_path):
        """Test that non-JSON event data is not silently stringified"""
        timeline = Timeline(clock=lambda: 0)
        timeline.add_event({'id': 'x', 'timestamp': 0, 'data': {'payload': object()}})

        with pytest.raises(TypeError):
            JSONExporter(str(tmp_path)).export_timeline(timeline, 'bad.json')

        assert not (tmp_path / 'bad.json').exists()

    def test_export_flame_graph(self, tmp_path, timeline):
        """Test writing a flame graph tree"""
        tree = TimelineVisualizer.generate_flame_graph(timeline.get_events())

        path = JSONExporter(str(tmp_path)).export_flame_graph(tree, 'flame.json')

        with open(path) as f:
            assert json.load(f)['children'][0]['name'] == 'fetch'


class TestStdoutExporter:
    """Test cases for StdoutExporter"""

    def test_print_stats(self, capsys, timeline):
        """Test printing statistics"""
        StdoutExporter(use_colors=False).print_stats(timeline.get_stats(), name='sample')

        out = capsys.readouterr().out
        assert 'Statistics: sample' in out
        assert 'Events: 3' in out
        assert 'network, render' in out

    def test_print_empty_stats(self, capsys):
        """Test printing stats of an empty timeline"""
        StdoutExporter(use_colors=False).print_stats(None)
        assert 'Timeline is empty' in capsys.readouterr().out

    def test_print_metrics(self, capsys, timeline):
        """Test printing metrics"""
        metrics = TimelineAnalyzer.calculate_metrics(timeline.get_events())
        StdoutExporter(use_colors=False).print_metrics(metrics)

        out = capsys.readouterr().out
        assert 'P95' in out
        assert '120.00ms' in out

    def test_print_patterns_swimlanes_frequency(self, capsys, timeline):
        """Test printing the remaining analysis sections"""
        events = timeline.get_events()
        exporter = StdoutExporter(use_colors=False)

        exporter.print_patterns(TimelineAnalyzer.find_patterns(events, min_support=1))
        exporter.print_swimlanes(TimelineVisualizer.generate_swimlanes(events))
        exporter.print_frequency(TimelineAnalyzer.calculate_frequency(events, 100))
        exporter.print_events(events, limit=2)

        out = capsys.readouterr().out
        assert 'network->render' in out
        assert 'Swimlanes' in out
        assert 'Event Frequency' in out
        assert '... and 1 more events' in out

    def test_print_histogram(self, capsys, timeline):
        """Test printing duration histogram bins"""
        values = [e.duration for e in timeline.get_events()]
        exporter = StdoutExporter(use_colors=False)

        exporter.print_histogram(TimelineVisualizer.generate_histogram(values, 4))
        exporter.print_histogram([])

        out = capsys.readouterr().out
        assert 'Duration Histogram' in out
        assert '0.00ms - 30.00ms' in out
        assert 'No values to plot' in out


class TestPrometheusExporter:
    """Test cases for PrometheusExporter"""

    def test_attach_records_events(self):
        """Test that attached timelines feed the metrics"""
        registry = CollectorRegistry()
        exporter = PrometheusExporter(port=0, registry=registry)
        timeline = Timeline(name='live', clock=lambda: 0)

        exporter.attach(timeline)
        timeline.add_event({'type': 'network', 'timestamp': 0, 'duration': 20})
        timeline.add_event({'type': 'network', 'timestamp': 1})

        labels = {'timeline': 'live', 'type': 'network'}
        assert registry.get_sample_value('timeline_events_total', labels) == 2
        assert registry.get_sample_value('timeline_event_duration_milliseconds_count', labels) == 1
        assert registry.get_sample_value('timeline_stored_events', {'timeline': 'live'}) == 2

        timeline.clear()
        assert registry.get_sample_value('timeline_stored_events', {'timeline': 'live'}) == 0

    def test_detach(self):
        """Test that detached timelines stop feeding the metrics"""
        registry = CollectorRegistry()
        exporter = PrometheusExporter(port=0, registry=registry)
        timeline = Timeline(name='live', clock=lambda: 0)

        exporter.attach(timeline)
        exporter.detach(timeline)
        timeline.add_event({'type': 'network', 'timestamp': 0})

        assert registry.get_sample_value(
            'timeline_events_total', {'timeline': 'live', 'type': 'network'}
        ) is None

    def test_metrics_text(self):
        """Test text exposition"""
        registry = CollectorRegistry()
        exporter = PrometheusExporter(port=0, registry=registry)
        exporter.record_event('t', Timeline(clock=lambda: 0).add_event({'type': 'x', 'timestamp': 0}))

        assert 'timeline_events_total' in exporter.get_metrics_text()
