"""Console table for any record value.

Each record type is described once as a list of FieldSpec entries (name,
accessor, shape, metadata). Rendering walks that list, so pydantic models and
dataclasses are handled the same way.
"""

import collections.abc
import dataclasses
import sys
import types
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from operator import attrgetter
from typing import Annotated, Any, Callable, List, Optional, TextIO, Tuple, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

PLACEHOLDER = "value absent"
MIN_COLUMN_WIDTH = 5
COLUMN_MARGIN = 5

_UNION_TYPES = (Union, types.UnionType)


class FieldShape(str, Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    REFERENCE = "reference"


@dataclass(frozen=True)
class FieldSpec:
    """How to read and display one field of a record"""
    name: str
    accessor: Callable[[Any], Any]
    shape: FieldShape
    # Shape behind a REFERENCE; equal to shape otherwise
    target: FieldShape
    metadata: str


def _is_sequence_type(annotation: Any) -> bool:
    origin = get_origin(annotation) or annotation
    if not isinstance(origin, type):
        return False
    return issubclass(origin, collections.abc.Sequence) and not issubclass(origin, (str, bytes, bytearray))


def _classify(annotation: Any) -> Tuple[FieldShape, FieldShape]:
    origin = get_origin(annotation)
    if origin is Annotated:
        return _classify(get_args(annotation)[0])

    if origin in _UNION_TYPES:
        args = get_args(annotation)
        present = [arg for arg in args if arg is not type(None)]
        if len(present) < len(args):
            target = _classify(present[0])[0] if len(present) == 1 else FieldShape.SCALAR
            return FieldShape.REFERENCE, target

    if _is_sequence_type(annotation):
        return FieldShape.SEQUENCE, FieldShape.SEQUENCE
    return FieldShape.SCALAR, FieldShape.SCALAR


def is_record(value: Any) -> bool:
    if isinstance(value, BaseModel):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


@lru_cache(maxsize=None)
def describe_fields(record_type: type) -> Tuple[FieldSpec, ...]:
    """Build the field descriptions of a pydantic model or dataclass type"""
    specs = []
    if issubclass(record_type, BaseModel):
        for name, field in record_type.model_fields.items():
            shape, target = _classify(field.annotation)
            specs.append(FieldSpec(name, attrgetter(name), shape, target, field.description or ""))
    elif dataclasses.is_dataclass(record_type):
        hints = get_type_hints(record_type)
        for field in dataclasses.fields(record_type):
            shape, target = _classify(hints.get(field.name, field.type))
            metadata = field.metadata.get("description", "")
            specs.append(FieldSpec(field.name, attrgetter(field.name), shape, target, metadata))
    else:
        raise TypeError(f"{record_type.__name__} is not a record type")
    return tuple(specs)


def _is_zero(value: Any) -> bool:
    """True for None and falsy builtin scalars (0, 0.0, "", False, b"").

    Other values are never zero: a nested record or a Decimal("0") in a
    scalar field is shown as-is rather than as the placeholder.
    """
    if value is None:
        return True
    if isinstance(value, (bool, int, float, complex, str, bytes)):
        return not value
    return False


def _display(spec: FieldSpec, record: Any) -> str:
    value = spec.accessor(record)

    if spec.shape is FieldShape.REFERENCE:
        if value is None:
            return PLACEHOLDER
        # A referenced sequence shows its container form, anything else its value
        if spec.target is FieldShape.SEQUENCE:
            return repr(value)
        return str(value)

    if spec.shape is FieldShape.SEQUENCE:
        return str(value)

    if _is_zero(value):
        return PLACEHOLDER
    return str(value)


def _column_width(cells: List[str]) -> int:
    longest = max((len(cell) for cell in cells), default=0)
    if longest > MIN_COLUMN_WIDTH:
        return longest + COLUMN_MARGIN
    return MIN_COLUMN_WIDTH


def format_record(value: Any) -> str:
    """Format a record as "name | value | metadata" lines, one per field"""
    if not is_record(value):
        return f"{type(value).__name__} | {value}\n"

    specs = describe_fields(type(value))
    rows = [(spec.name, _display(spec, value), spec.metadata) for spec in specs]

    name_width = _column_width([name for name, _, _ in rows])
    value_width = _column_width([shown for _, shown, _ in rows])

    lines = [f"{name:<{name_width}} | {shown:<{value_width}} | {metadata}\n" for name, shown, metadata in rows]
    return "".join(lines)


def render(value: Any, file: Optional[TextIO] = None) -> None:
    """Print format_record(value) to file, stdout by default"""
    (file or sys.stdout).write(format_record(value))
