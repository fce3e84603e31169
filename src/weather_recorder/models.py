import math
from datetime import datetime
from typing import Annotated, Iterable, Literal, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from weather_recorder.errors import ObservationValidationError

WeatherKind = Literal["snowy", "hotly"]
WEATHER_KINDS: Tuple[str, ...] = get_args(WeatherKind)

ABSOLUTE_ZERO = -273.15
# Default of --temp, below absolute zero so it can never pass validation
UNSET_TEMPERATURE = -274.0

Latitude = Annotated[float, Field(ge=-90, le=90)]
Longitude = Annotated[float, Field(ge=-180, le=180)]


class Coordinates(BaseModel):
    """Geographic coordinates"""
    latitude: Latitude
    longitude: Longitude

    def as_pair(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


class WeatherObservation(BaseModel):
    """Single weather observation recorded from the command line"""
    model_config = ConfigDict(frozen=True)

    kind: WeatherKind = Field(
        ..., serialization_alias="weather_type", description="Weather type, taken from the subcommand"
    )
    location: str = Field(..., serialization_alias="location", description="Name of the location")
    location_coords: Tuple[Latitude, Longitude] = Field(
        ..., serialization_alias="location_coords", description="Latitude and longitude of the location"
    )
    temperature: float = Field(
        ..., serialization_alias="temperature", description="Temperature at the location in degrees Celsius"
    )
    observed_at: Optional[datetime] = Field(None, serialization_alias="date", description="Time of the observation")
    comment: str = Field("", serialization_alias="info", description="Info from observer")

    @field_validator("location")
    @classmethod
    def _normalize_location(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("location is missing, did you forget --location?")
        return value.lower()

    @field_validator("temperature")
    @classmethod
    def _check_temperature(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("temperature must be a finite number")
        if value == UNSET_TEMPERATURE:
            raise ValueError("temperature is missing, did you forget --temp?")
        if value <= ABSOLUTE_ZERO:
            raise ValueError(f"temperature cannot be at or below {ABSOLUTE_ZERO} degrees Celsius")
        return value


def _describe_validation_error(error: ValidationError) -> str:
    messages = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail["loc"])
        messages.append(f"{field}: {detail['msg']}")
    return "; ".join(messages)


def record_observation(
    kind: str,
    location: str,
    temperature: float,
    coordinates: Optional[Coordinates],
    comment_words: Iterable[str] = (),
    now: Optional[datetime] = None,
) -> WeatherObservation:
    """Validate parsed flag values and stamp them with the observation time.

    Args:
        kind: Subcommand name, one of WEATHER_KINDS
        location: Location name as given on the command line
        temperature: Temperature in degrees Celsius, UNSET_TEMPERATURE if not given
        coordinates: Parsed --loc_crd value, None if the flag was not given
        comment_words: Trailing positional words, joined into the comment
        now: Observation time, defaults to the current local time

    Raises:
        ObservationValidationError: If any value is missing or out of range
    """
    if coordinates is None:
        raise ObservationValidationError("coordinates are missing, did you forget --loc_crd?")

    try:
        observation = WeatherObservation(
            kind=kind,
            location=location,
            location_coords=coordinates.as_pair(),
            temperature=temperature,
            comment=" ".join(comment_words),
        )
    except ValidationError as e:
        raise ObservationValidationError(_describe_validation_error(e)) from e

    return observation.model_copy(update={"observed_at": now or datetime.now().astimezone()})
