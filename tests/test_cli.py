import json
import logging

import pytest
import yaml
from weather_recorder.cli import build_parser, main, setup_logging
from weather_recorder.config import Config
from weather_recorder.errors import FlagParseError
from weather_recorder.formatter import PLACEHOLDER


@pytest.fixture
def settings(tmp_path):
    return Config(output_dir=tmp_path, log_dir=None)


def test_main_records_observation(tmp_path, settings, capsys):
    code = main(
        ["snowy", "--location", "Moscow", "--temp", "-5", "--loc_crd", "55.75,37.62", "light", "snow"],
        settings=settings,
    )

    assert code == 0
    for extension in ("json", "xml", "yaml", "toml"):
        assert (tmp_path / f"weather.{extension}").exists()

    data = json.loads((tmp_path / "weather.json").read_text(encoding="utf-8"))
    assert data["weather_type"] == "snowy"
    assert data["location"] == "moscow"
    assert data["location_coords"] == [55.75, 37.62]
    assert data["temperature"] == -5.0
    assert data["info"] == "light snow"

    out = capsys.readouterr().out
    assert out.startswith("\n")
    assert len(out.strip("\n").splitlines()) == 6
    assert "moscow" in out


def test_main_negative_coordinates(tmp_path, settings):
    code = main(["hotly", "--location", "Cape Town", "--temp", "31.5", "--loc_crd=-33.92,18.42"], settings=settings)

    assert code == 0
    data = yaml.safe_load((tmp_path / "weather.yaml").read_text(encoding="utf-8"))
    assert data["weather_type"] == "hotly"
    assert data["location"] == "cape town"
    assert data["location_coords"] == [-33.92, 18.42]
    assert "info" not in data


def test_main_without_comment_shows_placeholder(settings, capsys):
    assert main(["hotly", "--location", "Cairo", "--temp", "35", "--loc_crd", "30.04,31.24"], settings=settings) == 0
    last_line = capsys.readouterr().out.strip("\n").splitlines()[-1]
    assert last_line.split(" | ")[1].strip() == PLACEHOLDER


@pytest.mark.parametrize(
    "argv",
    [
        [],
        ["rainy", "--location", "Oslo", "--temp", "1", "--loc_crd", "59.9,10.7"],
        ["snowy", "--location", "Oslo", "--temp", "cold", "--loc_crd", "59.9,10.7"],
        ["snowy", "--location", "Oslo", "--temp", "1", "--loc_crd", "59.9"],
        ["snowy", "--location", "Oslo", "--temp", "1", "--loc_crd", "128.11,-301"],
        ["snowy", "--location", "Oslo", "--temp", "1", "--loc_crd", "59.9,10.7", "--humidity", "80"],
    ],
)
def test_main_flag_errors(tmp_path, settings, argv, capsys):
    assert main(argv, settings=settings) == 2
    assert "usage:" in capsys.readouterr().err
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize(
    "argv",
    [
        ["snowy", "--location", "Oslo", "--loc_crd", "59.9,10.7"],
        ["snowy", "--location", "Oslo", "--temp", "-273.15", "--loc_crd", "59.9,10.7"],
        ["snowy", "--location", "Oslo", "--temp", "1"],
        ["snowy", "--temp", "1", "--loc_crd", "59.9,10.7"],
    ],
)
def test_main_validation_errors(tmp_path, settings, argv):
    assert main(argv, settings=settings) == 1
    assert list(tmp_path.iterdir()) == []


def test_parser_raises_flag_parse_error():
    with pytest.raises(FlagParseError) as exc_info:
        build_parser().parse_args(["hotly", "--loc_crd", "мытипа,цифры"])
    assert "not a number" in str(exc_info.value)
    assert exc_info.value.usage.startswith("usage: weather-recorder hotly")


def test_parser_subcommands_share_flags():
    parser = build_parser()
    snowy = parser.parse_args(["snowy", "--location", "a", "--temp", "1", "--loc_crd", "1,2", "x"])
    hotly = parser.parse_args(["hotly", "--location", "a", "--temp", "1", "--loc_crd", "1,2", "x"])
    assert vars(snowy) | {"kind": None} == vars(hotly) | {"kind": None}
    assert (snowy.kind, hotly.kind) == ("snowy", "hotly")


def test_main_negative_coordinates_after_space(tmp_path, settings):
    code = main(
        ["snowy", "--location", "Ushuaia", "--temp", "-2", "--loc_crd", "-54.8,-68.3", "sleet"], settings=settings
    )

    assert code == 0
    data = json.loads((tmp_path / "weather.json").read_text(encoding="utf-8"))
    assert data["location_coords"] == [-54.8, -68.3]
    assert data["temperature"] == -2.0
    assert data["info"] == "sleet"


def test_parser_keeps_flag_without_value_an_error():
    with pytest.raises(FlagParseError):
        build_parser().parse_args(["snowy", "--location", "Oslo", "--loc_crd", "--temp", "1"])


@pytest.mark.parametrize("temperature", ["inf", "-inf", "nan"])
def test_main_rejects_non_finite_temperature(tmp_path, settings, temperature):
    argv = ["hotly", "--location", "Cairo", "--temp", temperature, "--loc_crd", "30.04,31.24"]
    assert main(argv, settings=settings) == 1
    assert list(tmp_path.iterdir()) == []


def _with_root_handlers(handlers, check):
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers[:] = handlers
    try:
        check(root)
    finally:
        for handler in root.handlers:
            if handler not in saved_handlers:
                handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_configures_once(tmp_path):
    def check(root):
        assert setup_logging(Config(output_dir=tmp_path, log_dir=tmp_path / "logs")) is False
        assert not (tmp_path / "logs").exists()

    _with_root_handlers([logging.NullHandler()], check)


def test_setup_logging_writes_log_file(tmp_path):
    def check(root):
        assert setup_logging(Config(output_dir=tmp_path, log_dir=tmp_path / "logs")) is True
        assert (tmp_path / "logs" / "weather_recorder.log").exists()
        assert any(isinstance(handler, logging.FileHandler) for handler in root.handlers)

    _with_root_handlers([], check)
