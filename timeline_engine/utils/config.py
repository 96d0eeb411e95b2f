# timeline_engine/utils/config.py - Configuration management
"""
Configuration management for the timeline engine.
Loads settings from YAML files and builds configured components.
"""

import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from timeline_engine.errors import ConfigError


class Config:
    """
    Configuration manager for the timeline engine.

    Loads configuration from YAML files and provides access to settings.
    Components are created from the configuration and handed to callers
    instead of living in a shared global.
    """

    DEFAULT_CONFIG = {
        'timeline': {
            'name': 'Timeline',
            'max_events': 10000,
        },
        'logger': {
            'batch_size': 100,
            'batch_timeout_ms': 100,
            'filters': [],
        },
        'analysis': {
            'bucket_size_ms': 1000,
            'min_support': 2,
            'max_gap_ms': 1000,
            'histogram_bins': 20,
        },
        'output': {
            'directory': '.',
            'prometheus_port': 9090,
        }
    }

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to YAML configuration file
        """
        self.logger = logging.getLogger(__name__)
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file:
            self.load_from_file(config_file)

    def load_from_file(self, config_file: str):
        """
        Load configuration from YAML file.

        Args:
            config_file: Path to YAML file

        Raises:
            ConfigError: If the file is not valid YAML or not a mapping
        """
        config_path = Path(config_file)

        if not config_path.exists():
            self.logger.warning(f"Config file not found: {config_file}, using defaults")
            return

        try:
            with open(config_path, 'r') as f:
                loaded_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            self.logger.error(f"Failed to load config: {e}")
            raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

        if loaded_config is None:
            return
        if not isinstance(loaded_config, dict):
            raise ConfigError(f"Config file {config_file} must contain a mapping")

        self._merge_config(self.config, loaded_config)
        self.logger.info(f"Loaded configuration from {config_file}")

    def _merge_config(self, base: Dict, override: Dict):
        """
        Recursively merge configuration dictionaries.

        Args:
            base: Base configuration dictionary
            override: Override configuration dictionary
        """
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by dot-notation key.

        Args:
            key: Configuration key (e.g., 'timeline.max_events')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """
        Set configuration value by dot-notation key.

        Args:
            key: Configuration key (e.g., 'logger.batch_size')
            value: Value to set
        """
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    def to_dict(self) -> Dict:
        """
        Get full configuration as dictionary.

        Returns:
            Configuration dictionary
        """
        return copy.deepcopy(self.config)

    def save_to_file(self, config_file: str):
        """
        Save current configuration to YAML file.

        Args:
            config_file: Path to output YAML file
        """
        config_path = Path(config_file)

        with open(config_path, 'w') as f:
            yaml.safe_dump(self.config, f, default_flow_style=False)

        self.logger.info(f"Saved configuration to {config_file}")

    def create_timeline(self, **overrides):
        """
        Build a Timeline from the 'timeline' section.

        Args:
            **overrides: Keyword arguments taking precedence over the config

        Returns:
            New Timeline instance
        """
        from timeline_engine.collector.timeline import Timeline

        options = {
            'name': self.get('timeline.name', 'Timeline'),
            'max_events': self.get('timeline.max_events', 10000),
        }
        options.update(overrides)
        return Timeline(**options)

    def create_logger(self, timeline=None, **overrides):
        """
        Build an EventLogger from the 'logger' section.

        Args:
            timeline: Timeline to write into (a new one is created if omitted)
            **overrides: Keyword arguments taking precedence over the config

        Returns:
            New EventLogger instance
        """
        from timeline_engine.collector.event_logger import EventLogger

        options = {
            'timeline': timeline if timeline is not None else self.create_timeline(),
            'batch_size': self.get('logger.batch_size', 100),
            'batch_timeout': self.get('logger.batch_timeout_ms', 100),
        }
        options.update(overrides)

        event_logger = EventLogger(**options)
        for event_type in self.get('logger.filters', []) or []:
            event_logger.add_filter(event_type)

        return event_logger

    def create_prometheus_exporter(self, registry=None, **overrides):
        """
        Build a PrometheusExporter on the configured 'output.prometheus_port'.

        Args:
            registry: Prometheus registry (default: the global registry)
            **overrides: Keyword arguments taking precedence over the config

        Returns:
            New PrometheusExporter instance
        """
        from timeline_engine.exporters.prometheus import PrometheusExporter

        options = {
            'port': self.get('output.prometheus_port', 9090),
            'registry': registry,
        }
        options.update(overrides)
        return PrometheusExporter(**options)
