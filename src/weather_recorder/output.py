import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable

from weather_recorder.errors import OutputFileError, SerializationError, WeatherRecorderError
from weather_recorder.models import WeatherObservation
from weather_recorder.serializers import FORMATS, OutputFormat

logger = logging.getLogger("weather_recorder.output")


@dataclass
class WriteReport:
    """Outcome of writing an observation, keyed by format name"""
    written: Dict[str, Path] = field(default_factory=dict)
    failed: Dict[str, WeatherRecorderError] = field(default_factory=dict)


def _encode(output_format: OutputFormat, observation: WeatherObservation) -> str:
    try:
        return output_format.encode(observation)
    except Exception as e:
        raise SerializationError(output_format.name, e) from e


def _write(path: Path, payload: str) -> None:
    try:
        path.write_text(payload, encoding="utf-8")
    except OSError as e:
        raise OutputFileError(path, e) from e


def write_observation(
    observation: WeatherObservation, output_dir: Path, formats: Iterable[OutputFormat] = FORMATS
) -> WriteReport:
    """Write the observation to weather.<ext> in output_dir, once per format.

    A failing format is logged and skipped; the others are still written.
    """
    report = WriteReport()
    for output_format in formats:
        path = Path(output_dir) / f"weather.{output_format.extension}"
        try:
            payload = _encode(output_format, observation)
            _write(path, payload)
        except (SerializationError, OutputFileError) as e:
            logger.error(str(e))
            report.failed[output_format.name] = e
            continue

        logger.info(f"Observation serialized to {output_format.name}, file {path} updated")
        report.written[output_format.name] = path

    return report
