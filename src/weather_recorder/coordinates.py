import logging
import math
import re
from enum import Enum

from pydantic import ValidationError

from weather_recorder.models import Coordinates

logger = logging.getLogger("weather_recorder.coordinates")

# ASCII decimal only; float() alone would also take other scripts' digits and "_" separators
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:inf|infinity|nan)", re.ASCII | re.IGNORECASE)


class ErrorKind(str, Enum):
    WRONG_ARITY = "wrong_arity"
    NOT_A_NUMBER = "not_a_number"
    OUT_OF_RANGE = "out_of_range"


class CoordinateError(ValueError):
    """Invalid "<lat>,<lon>" argument"""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


def parse_coordinates(arg: str) -> Coordinates:
    """Parse a "<lat>,<lon>" argument into bounded coordinates.

    Nothing is stored on failure: either both values come back or neither does.

    Raises:
        CoordinateError: With kind WRONG_ARITY unless there are exactly two parts,
            NOT_A_NUMBER if a part is not a decimal number, OUT_OF_RANGE if the
            latitude is outside [-90, 90] or the longitude outside [-180, 180]
    """
    parts = arg.split(",")
    if len(parts) != 2:
        raise CoordinateError(
            ErrorKind.WRONG_ARITY, f"expected 2 comma-separated coordinates, got {len(parts)} in {arg!r}"
        )

    values = []
    for part in parts:
        if not _DECIMAL.fullmatch(part.strip()):
            raise CoordinateError(ErrorKind.NOT_A_NUMBER, f"{part!r} is not a number")
        value = float(part)
        if math.isnan(value):
            raise CoordinateError(ErrorKind.NOT_A_NUMBER, f"{part!r} is not a number")
        values.append(value)

    latitude, longitude = values
    try:
        coords = Coordinates(latitude=latitude, longitude=longitude)
    except ValidationError as e:
        raise CoordinateError(
            ErrorKind.OUT_OF_RANGE,
            f"latitude must be in [-90, 90] and longitude in [-180, 180], got ({latitude}, {longitude})",
        ) from e

    logger.debug(f"Parsed coordinates: {coords}")
    return coords
