"""
Decoding of the positional records sent by the cars.

A record is a JSON array whose slots are identified by position only. The
tables below are the wire contract: index, field name, how the slot is
converted and whether it may be null.

    [uptime, utc, freememory8, rssi, gas_raw, brake_raw,
     gas_processed, brake_processed, front_controller, back_controller]

    controller = [voltage, temperature, left_motor, right_motor]
    motor      = [target_input, speed, current, error_code]

Slots past the end of the array are treated like an explicit null.
"""

import logging
import math
from typing import Any, Callable, NamedTuple

from ..config import Policy
from ..exceptions import RecordStructureError
from ..schemas import ControllerReading, MotorReading, TelemetryRecord

logger = logging.getLogger(__name__)


class FieldSpec(NamedTuple):
    index: int
    name: str
    convert: Callable[[Any, str], Any]
    required: bool = False


class _FieldError(Exception):
    def __init__(self, path: str, problem: str):
        self.path = path
        self.problem = problem
        super().__init__(f"{path} {problem}")


def _check_number(value: Any, path: str) -> None:
    # bool is an int subclass but never a valid reading
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise _FieldError(path, "is not a number")
    if isinstance(value, float) and not math.isfinite(value):
        raise _FieldError(path, "is not a finite number")


def to_int(value: Any, path: str) -> int:
    _check_number(value, path)
    return int(value)


def to_float(value: Any, path: str) -> float:
    _check_number(value, path)
    try:
        return float(value)
    except OverflowError:
        raise _FieldError(path, "is not a finite number") from None


def _decode_block(value: Any, fields: tuple[FieldSpec, ...], path: str) -> dict[str, Any]:
    if not isinstance(value, list):
        raise _FieldError(path, "is not an array")
    if len(value) != len(fields):
        raise _FieldError(path, f"must have {len(fields)} elements, got {len(value)}")

    data = {}
    for field in fields:
        field_path = f"{path}.{field.name}"
        item = value[field.index]
        if item is None:
            raise _FieldError(field_path, "is missing")
        data[field.name] = field.convert(item, field_path)
    return data


def decode_motor(value: Any, path: str) -> MotorReading:
    return MotorReading(**_decode_block(value, MOTOR_FIELDS, path))


def decode_controller(value: Any, path: str) -> ControllerReading:
    return ControllerReading(**_decode_block(value, CONTROLLER_FIELDS, path))


MOTOR_FIELDS = (
    FieldSpec(0, "target_input", to_int, required=True),
    FieldSpec(1, "speed", to_float, required=True),
    FieldSpec(2, "current", to_float, required=True),
    FieldSpec(3, "error_code", to_int, required=True),
)

CONTROLLER_FIELDS = (
    FieldSpec(0, "voltage", to_float, required=True),
    FieldSpec(1, "temperature", to_float, required=True),
    FieldSpec(2, "left_motor", decode_motor, required=True),
    FieldSpec(3, "right_motor", decode_motor, required=True),
)

# Required fields come first, so the first missing one in this order is reported
RECORD_FIELDS = (
    FieldSpec(0, "uptime", to_int, required=True),
    FieldSpec(1, "utc", to_int, required=True),
    FieldSpec(2, "freememory8", to_int, required=True),
    FieldSpec(3, "rssi", to_int),
    FieldSpec(4, "gas_raw", to_int),
    FieldSpec(5, "brake_raw", to_int),
    FieldSpec(6, "gas_processed", to_float),
    FieldSpec(7, "brake_processed", to_float),
    FieldSpec(8, "front_controller", decode_controller),
    FieldSpec(9, "back_controller", decode_controller),
)


class RecordDecoder:
    """
    Turns one positional array into a TelemetryRecord.

    Both policies reject a record that is not an array or lacks a valid
    required field. Under the strict policy any invalid optional slot or
    malformed controller block rejects the record too; under the lenient
    policy such a slot is dropped and the rest of the record is kept.
    """

    def __init__(self, policy: Policy = Policy.STRICT):
        self.policy = policy

    def decode(self, value: Any, index: int) -> TelemetryRecord:
        if not isinstance(value, list):
            raise RecordStructureError(index, "record", "is not an array")

        data = {}
        for field in RECORD_FIELDS:
            raw = value[field.index] if field.index < len(value) else None
            if raw is None:
                if field.required:
                    raise RecordStructureError(index, field.name, "is missing")
                continue

            try:
                data[field.name] = field.convert(raw, field.name)
            except _FieldError as e:
                if field.required or self.policy is Policy.STRICT:
                    raise RecordStructureError(index, e.path, e.problem) from None
                logger.debug(f"[DECODE] record {index}: dropping {field.name}, {e}")

        return TelemetryRecord(**data)
