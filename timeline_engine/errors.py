# timeline_engine/errors.py - Exception types
"""
Exceptions raised by the timeline engine.
"""


class TimelineEngineError(Exception):
    """Base class for timeline engine errors"""


class MissingMarkError(TimelineEngineError, KeyError):
    """
    Raised when a measure references a mark that was never recorded.
    """

    def __init__(self, mark_name: str):
        self.mark_name = mark_name
        super().__init__(f'Start mark "{mark_name}" not found')

    def __str__(self):
        # KeyError would repr() the message
        return self.args[0]


class ConfigError(TimelineEngineError):
    """Raised when a configuration file cannot be parsed"""
