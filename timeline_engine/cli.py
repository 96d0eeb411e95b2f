# timeline_engine/cli.py - Command-line interface
"""
Command-line interface for inspecting exported timelines.
"""

import click
import sys

from timeline_engine.utils.logger import setup_logging
from timeline_engine.utils.config import Config
from timeline_engine.errors import ConfigError


def _load(path):
    from timeline_engine.exporters.json_exporter import JSONExporter

    try:
        return JSONExporter().load_timeline(path)
    except (OSError, ValueError) as e:
        click.echo(f"Error: cannot load timeline from {path}: {e}", err=True)
        sys.exit(1)


def _writer(config):
    from timeline_engine.exporters.json_exporter import JSONExporter

    return JSONExporter(config.get('output.directory', '.'))


@click.group()
@click.option('--log-level', default='WARNING', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']))
@click.option('--log-file', type=click.Path(), help='Log file path')
@click.option('--config', 'config_file', type=click.Path(exists=True), help='Configuration file')
@click.pass_context
def cli(ctx, log_level, log_file, config_file):
    """
    Timeline Engine

    Inspect and analyze exported event timelines.
    """
    ctx.ensure_object(dict)

    setup_logging(level=log_level, log_file=log_file)

    try:
        ctx.obj['config'] = Config(config_file)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.argument('timeline_file', type=click.Path(exists=True))
@click.option('--no-color', is_flag=True, help='Disable colored output')
def stats(timeline_file, no_color):
    """
    Show statistics and duration metrics of a timeline.

    Example:
        timeline-engine stats timeline.json
    """
    from timeline_engine.analyzer.timeline_analyzer import TimelineAnalyzer
    from timeline_engine.exporters.stdout import StdoutExporter

    timeline = _load(timeline_file)
    exporter = StdoutExporter(use_colors=not no_color)

    exporter.print_stats(timeline.get_stats(), name=timeline.name)
    exporter.print_metrics(TimelineAnalyzer.calculate_metrics(timeline.get_events()))


@cli.command()
@click.argument('timeline_file', type=click.Path(exists=True))
@click.option('--bucket-size', type=float, help='Frequency bucket width (ms)')
@click.option('--min-support', type=int, help='Minimum pattern occurrences')
@click.option('--max-gap', type=float, help='Maximum gap between paired events (ms)')
@click.option('--output', type=click.Path(), help='Write the analysis as JSON to this file')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.pass_context
def analyze(ctx, timeline_file, bucket_size, min_support, max_gap, output, no_color):
    """
    Analyze a timeline: frequency, patterns, metrics and lanes.

    Example:
        timeline-engine analyze timeline.json --bucket-size 500
        timeline-engine analyze timeline.json --output analysis.json
    """
    from timeline_engine.analyzer.timeline_analyzer import TimelineAnalyzer
    from timeline_engine.analyzer.visualizer import TimelineVisualizer
    from timeline_engine.exporters.stdout import StdoutExporter

    config = ctx.obj['config']
    if bucket_size is None:
        bucket_size = config.get('analysis.bucket_size_ms', 1000)
    if min_support is None:
        min_support = config.get('analysis.min_support', 2)
    if max_gap is None:
        max_gap = config.get('analysis.max_gap_ms', 1000)

    timeline = _load(timeline_file)
    events = timeline.get_events()

    frequency = TimelineAnalyzer.calculate_frequency(events, bucket_size)
    patterns = TimelineAnalyzer.find_patterns(events, min_support=min_support, max_gap=max_gap)
    metrics = TimelineAnalyzer.calculate_metrics(events)
    lanes = TimelineVisualizer.generate_swimlanes(events)

    if output:
        analysis = {
            'timeline': timeline.name,
            'stats': timeline.get_stats(),
            'metrics': metrics,
            'frequency': frequency,
            'patterns': patterns,
            'swimlanes': [
                {'name': lane['name'], 'events': [e.id for e in lane['events']]}
                for lane in lanes
            ],
        }
        path = _writer(config).export_analysis(analysis, output)
        click.echo(f"Analysis written to {path}")
        return

    exporter = StdoutExporter(use_colors=not no_color)
    exporter.print_stats(timeline.get_stats(), name=timeline.name)
    exporter.print_metrics(metrics)
    exporter.print_frequency(frequency)
    exporter.print_patterns(patterns)
    exporter.print_swimlanes(lanes)


@cli.command()
@click.argument('timeline_file', type=click.Path(exists=True))
@click.option('--output', type=click.Path(), required=True, help='Output JSON file')
@click.pass_context
def flamegraph(ctx, timeline_file, output):
    """
    Build a flame graph tree from a timeline.

    Example:
        timeline-engine flamegraph timeline.json --output flame.json
    """
    from timeline_engine.analyzer.visualizer import TimelineVisualizer

    timeline = _load(timeline_file)
    tree = TimelineVisualizer.generate_flame_graph(timeline.get_events())

    path = _writer(ctx.obj['config']).export_flame_graph(tree, output)
    click.echo(f"Flame graph with {len(tree['children'])} root frames written to {path}")


@cli.command()
@click.argument('timeline_file', type=click.Path(exists=True))
@click.option('--bins', type=int, help='Number of histogram bins')
@click.option('--type', 'event_type', help='Only include events of this type')
@click.option('--no-color', is_flag=True, help='Disable colored output')
@click.pass_context
def histogram(ctx, timeline_file, bins, event_type, no_color):
    """
    Show a histogram of event durations.

    Example:
        timeline-engine histogram timeline.json --bins 10 --type network
    """
    from timeline_engine.analyzer.visualizer import TimelineVisualizer
    from timeline_engine.exporters.stdout import StdoutExporter

    if bins is None:
        bins = ctx.obj['config'].get('analysis.histogram_bins', 20)

    timeline = _load(timeline_file)
    events = timeline.get_events_by_type(event_type) if event_type else timeline.get_events()

    values = [event.duration for event in events]
    StdoutExporter(use_colors=not no_color).print_histogram(
        TimelineVisualizer.generate_histogram(values, bins)
    )


@cli.command()
@click.argument('timeline_files', nargs=-1, required=True, type=click.Path(exists=True))
@click.option('--output', type=click.Path(), required=True, help='Output JSON file')
@click.option('--name', default='Merged', help='Name of the merged timeline')
@click.pass_context
def merge(ctx, timeline_files, output, name):
    """
    Merge several timelines into one.

    Example:
        timeline-engine merge a.json b.json --output merged.json
    """
    from timeline_engine.utils import timeline_utils

    config = ctx.obj['config']
    timelines = [_load(path) for path in timeline_files]
    merged = timeline_utils.merge(
        *timelines,
        name=name,
        max_events=config.get('timeline.max_events', 10000)
    )

    total = sum(len(t) for t in timelines)
    if len(merged) < total:
        click.echo(f"Warning: {total - len(merged)} events dropped by capacity", err=True)

    path = _writer(config).export_timeline(merged, output)
    click.echo(f"Merged {len(merged)} events into {path}")


@cli.command()
@click.argument('old_file', type=click.Path(exists=True))
@click.argument('new_file', type=click.Path(exists=True))
def diff(old_file, new_file):
    """
    Show events present in NEW_FILE but not in OLD_FILE.

    Example:
        timeline-engine diff before.json after.json
    """
    from timeline_engine.utils import timeline_utils

    old = timeline_utils.snapshot(_load(old_file))
    new = timeline_utils.snapshot(_load(new_file))
    result = timeline_utils.diff(old, new)

    click.echo(f"Event count change: {result['events_diff']:+d}")
    click.echo(f"New events: {len(result['new_events'])}")
    for event in result['new_events']:
        click.echo(f"  [{event['type']}] {event['name']} at {event['timestamp']}")


if __name__ == '__main__':
    cli(obj={})
