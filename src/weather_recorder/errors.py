"""Errors raised while recording an observation.

Flag and validation errors stop the run. Serialization and file errors only
skip the affected output format.
"""

from pathlib import Path


class WeatherRecorderError(Exception):
    """Base class for recorder errors"""


class FlagParseError(WeatherRecorderError):
    """Malformed or missing command-line flags"""

    def __init__(self, message: str, usage: str = ""):
        super().__init__(message)
        self.usage = usage


class ObservationValidationError(WeatherRecorderError):
    """Flag values that do not make a valid observation"""


class SerializationError(WeatherRecorderError):
    def __init__(self, format_name: str, cause: Exception):
        super().__init__(f"Failed to serialize observation to {format_name}: {cause}")
        self.format_name = format_name
        self.cause = cause


class OutputFileError(WeatherRecorderError):
    def __init__(self, path: Path, cause: OSError):
        super().__init__(f"Failed to write file {path}: {cause}")
        self.path = path
        self.cause = cause
