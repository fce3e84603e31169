import argparse
import logging
import sys
from typing import List, NoReturn, Optional, Sequence

from weather_recorder.config import Config, config
from weather_recorder.coordinates import CoordinateError, parse_coordinates
from weather_recorder.errors import FlagParseError, ObservationValidationError
from weather_recorder.formatter import render
from weather_recorder.models import UNSET_TEMPERATURE, WEATHER_KINDS, Coordinates, record_observation
from weather_recorder.output import write_observation

logger = logging.getLogger("weather_recorder.cli")

LOG_FILE_NAME = "weather_recorder.log"

# Flags whose value may start with "-", like a southern latitude or a frost temperature
SIGNED_VALUE_FLAGS = ("--loc_crd", "--temp")


def _attach_signed_values(args: Sequence[str]) -> List[str]:
    """Rewrite "--loc_crd -33.9,18.4" as "--loc_crd=-33.9,18.4" so argparse keeps it a value"""
    attached: List[str] = []
    index = 0
    while index < len(args):
        arg = args[index]
        if arg in SIGNED_VALUE_FLAGS and index + 1 < len(args):
            value = args[index + 1]
            if value.startswith("-") and not value.startswith("--"):
                attached.append(f"{arg}={value}")
                index += 2
                continue
        attached.append(arg)
        index += 1
    return attached


class FlagParser(argparse.ArgumentParser):
    """ArgumentParser that raises FlagParseError instead of exiting"""

    def error(self, message: str) -> NoReturn:
        raise FlagParseError(message, usage=self.format_usage())

    def parse_known_args(self, args=None, namespace=None):
        if args is None:
            args = sys.argv[1:]
        return super().parse_known_args(_attach_signed_values(args), namespace)


def _coordinates_flag(value: str) -> Coordinates:
    try:
        return parse_coordinates(value)
    except CoordinateError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> FlagParser:
    flags = FlagParser(add_help=False)
    flags.add_argument("--location", default="", help="Name of the location")
    flags.add_argument(
        "--temp", type=float, default=UNSET_TEMPERATURE, help="Temperature at the location in degrees Celsius"
    )
    flags.add_argument(
        "--loc_crd",
        type=_coordinates_flag,
        default=None,
        metavar="LAT,LON",
        help="Coordinates of the location",
    )
    flags.add_argument("comment", nargs="*", help="Info from observer")

    parser = FlagParser(prog="weather-recorder", description="Record a weather observation in four file formats")
    subcommands = parser.add_subparsers(dest="kind", metavar="{" + ",".join(WEATHER_KINDS) + "}")
    subcommands.required = True
    for kind in WEATHER_KINDS:
        subcommands.add_parser(kind, parents=[flags], help=f"Record {kind} weather")
    return parser


def setup_logging(settings: Config) -> bool:
    """Configure root logging once per process.

    Returns False and opens no handlers when the root logger is already
    configured, so repeated main() calls keep the first run's setup.
    """
    if logging.getLogger().handlers:
        return False

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(settings.log_dir / LOG_FILE_NAME))

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )
    return True


def main(argv: Optional[Sequence[str]] = None, settings: Optional[Config] = None) -> int:
    if settings is None:
        settings = config
    setup_logging(settings)

    try:
        args = build_parser().parse_args(argv)
    except FlagParseError as e:
        logger.error(f"Error while parsing flags: {e}")
        sys.stderr.write(e.usage)
        return 2

    logger.info(f"Weather parameters received for type: {args.kind}")

    try:
        observation = record_observation(
            kind=args.kind,
            location=args.location,
            temperature=args.temp,
            coordinates=args.loc_crd,
            comment_words=args.comment,
        )
    except ObservationValidationError as e:
        logger.error(f"Invalid observation: {e}")
        return 1

    write_observation(observation, settings.output_dir)

    print()
    render(observation)
    return 0
