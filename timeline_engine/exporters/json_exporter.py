# timeline_engine/exporters/json_exporter.py - JSON format exporter
"""
Writes timeline exports, snapshots and analysis results as JSON files,
and reads timeline exports back.
"""

import json
from pathlib import Path
from datetime import datetime
from typing import Dict, Optional, Union
import logging

from timeline_engine.collector.timeline import Timeline


class JSONExporter:
    """
    Exports timelines and analysis results to JSON files.
    """

    def __init__(self, output_dir: Optional[str] = None):
        """
        Initialize the JSON exporter.

        Args:
            output_dir: Directory to save JSON files (default: current directory)
        """
        self.output_dir = Path(output_dir) if output_dir else Path('.')
        self.logger = logging.getLogger(__name__)

    def _resolve(self, filename: Optional[str], prefix: str) -> Path:
        if not filename:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            filename = f'{prefix}_{timestamp}.json'
        return self.output_dir / filename

    def _write(self, output_path: Path, payload: Dict):
        # Serialize first so an unencodable value leaves no partial file
        text = json.dumps(payload, indent=2)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text)

    def export_timeline(self, timeline: Timeline, filename: Optional[str] = None) -> str:
        """
        Export a timeline in its serialized form.

        The file holds exactly Timeline.export(), so it can be read back
        with load_timeline().

        Args:
            timeline: Timeline to export
            filename: Output filename (auto-generated if not provided)

        Returns:
            Path to output file
        """
        output_path = self._resolve(filename, 'timeline')
        data = timeline.export()
        self._write(output_path, data)

        self.logger.info(f"Exported {len(data['events'])} events to {output_path}")
        return str(output_path)

    def export_snapshot(self, snapshot: Dict, filename: Optional[str] = None) -> str:
        """
        Export a timeline snapshot.

        Args:
            snapshot: Snapshot dictionary (see timeline_utils.snapshot)
            filename: Output filename (auto-generated if not provided)

        Returns:
            Path to output file
        """
        output_path = self._resolve(filename, 'snapshot')
        self._write(output_path, snapshot)

        self.logger.info(f"Exported snapshot of {snapshot.get('event_count', 0)} events to {output_path}")
        return str(output_path)

    def export_analysis(self, analysis: Dict, filename: Optional[str] = None) -> str:
        """
        Export analysis results.

        Args:
            analysis: Analysis dictionary
            filename: Output filename (auto-generated if not provided)

        Returns:
            Path to output file
        """
        output_path = self._resolve(filename, 'analysis')

        self._write(output_path, {
            'timestamp': datetime.now().isoformat(),
            'analysis': analysis,
        })

        self.logger.info(f"Exported analysis to {output_path}")
        return str(output_path)

    def export_flame_graph(self, tree: Dict, filename: Optional[str] = None) -> str:
        """Export a flame graph tree from TimelineVisualizer.generate_flame_graph()"""
        output_path = self._resolve(filename, 'flamegraph')
        self._write(output_path, tree)

        self.logger.info(f"Exported flame graph to {output_path}")
        return str(output_path)

    def load_timeline(self, path: Union[str, Path], max_events: Optional[int] = None) -> Timeline:
        """
        Load a timeline from an exported JSON file.

        Args:
            path: Path to a file written by export_timeline
            max_events: Capacity of the loaded timeline (default: enough for every event)

        Returns:
            Timeline populated with the file's events

        Raises:
            ValueError: If the file is not a JSON object
        """
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")

        events = data.get('events') or []
        capacity = max_events if max_events is not None else max(len(events), 1)

        timeline = Timeline(max_events=capacity)
        timeline.import_data(data)

        self.logger.info(f"Loaded {len(timeline)} events from {path}")
        return timeline
