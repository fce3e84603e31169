import json
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

import tomlkit
import yaml

from weather_recorder.models import WeatherObservation

# Keys written only when the observation carries a value
_OPTIONAL_KEYS = ("info",)


@dataclass(frozen=True)
class OutputFormat:
    name: str
    extension: str
    encode: Callable[[WeatherObservation], str]


def _as_mapping(observation: WeatherObservation, mode: str = "python") -> Dict[str, Any]:
    data = observation.model_dump(mode=mode, by_alias=True)
    data["location_coords"] = list(data["location_coords"])
    return data


def _drop_empty(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if key not in _OPTIONAL_KEYS or value}


def encode_json(observation: WeatherObservation) -> str:
    data = _drop_empty(_as_mapping(observation, mode="json"))
    return json.dumps(data, indent="\t", ensure_ascii=False, allow_nan=False)


def encode_xml(observation: WeatherObservation) -> str:
    """Encode as a <weather_report> document with nested <lat>/<long> coordinates"""
    data = _drop_empty(_as_mapping(observation, mode="json"))
    root = ET.Element("weather_report")

    for key, value in data.items():
        element = ET.SubElement(root, key)
        if key == "location_coords":
            latitude, longitude = value
            ET.SubElement(element, "lat").text = str(latitude)
            ET.SubElement(element, "long").text = str(longitude)
        elif value is not None:
            element.text = str(value)

    ET.indent(root, space="\t")
    return ET.tostring(root, encoding="unicode")


def encode_yaml(observation: WeatherObservation) -> str:
    data = _drop_empty(_as_mapping(observation))
    # default_flow_style=None keeps the mapping in block style and the coordinate pair inline
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=None)


def encode_toml(observation: WeatherObservation) -> str:
    data = _as_mapping(observation)
    comment_field = WeatherObservation.model_fields["comment"]
    doc = tomlkit.document()

    for key, value in data.items():
        # TOML has no null
        if value is None:
            continue
        if key == comment_field.serialization_alias and comment_field.description:
            doc.add(tomlkit.comment(comment_field.description))
        doc.add(key, value)

    return tomlkit.dumps(doc)


FORMATS: Tuple[OutputFormat, ...] = (
    OutputFormat("JSON", "json", encode_json),
    OutputFormat("XML", "xml", encode_xml),
    OutputFormat("YAML", "yaml", encode_yaml),
    OutputFormat("TOML", "toml", encode_toml),
)
