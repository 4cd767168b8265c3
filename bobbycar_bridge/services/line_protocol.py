"""
Rendering of decoded records as InfluxDB line protocol.

    measurement,tag=value,... field=value,... timestamp

Field and tag order is fixed per line kind; downstream consumers match on it.
Integers are written bare (no ``i`` suffix), floats with ``repr``.
"""

from ..schemas import ControllerReading, MotorReading, TelemetryRecord

_TAG_ESCAPES = str.maketrans({",": r"\,", "=": r"\=", " ": r"\ "})


def escape_tag(value: str) -> str:
    return value.translate(_TAG_ESCAPES)


def format_value(value: int | float) -> str:
    if isinstance(value, float):
        return repr(value)
    return str(value)


def format_line(
    measurement: str,
    tags: list[tuple[str, str]],
    fields: list[tuple[str, int | float | None]],
    timestamp: int,
) -> str:
    """Render one line, leaving out fields whose value is None."""
    tag_set = "".join(f",{key}={escape_tag(value)}" for key, value in tags)
    field_set = ",".join(f"{key}={format_value(value)}" for key, value in fields if value is not None)
    return f"{measurement}{tag_set} {field_set} {timestamp}\n"


def _controller_lines(
    host: str, board: str, controller: ControllerReading, timestamp: int
) -> list[str]:
    lines = [
        format_line(
            "measure",
            [("host", host), ("board", board)],
            [("voltage", controller.voltage), ("temperature", controller.temperature)],
            timestamp,
        )
    ]

    motor: MotorReading
    for side, motor in (("left", controller.left_motor), ("right", controller.right_motor)):
        tags = [("host", host), ("board", board), ("side", side)]
        lines.append(format_line("command", tags, [("inputTgt", motor.target_input)], timestamp))
        lines.append(
            format_line(
                "measure",
                tags,
                [("speed", motor.speed), ("current", motor.current), ("error", motor.error_code)],
                timestamp,
            )
        )
    return lines


def encode_record(record: TelemetryRecord, host: str) -> list[str]:
    """
    Encode one record into its lines.

    Always one ``system`` line; an ``inputs`` line per kind (raw, processed)
    that has at least one pedal value; a full measure/command block per
    controller present. Every line carries the record's utc timestamp.
    """
    ts = record.utc
    lines = [
        format_line(
            "system",
            [("host", host)],
            [("uptime", record.uptime), ("freememory8", record.freememory8), ("rssi", record.rssi)],
            ts,
        )
    ]

    potis = [("host", host), ("type", "potis")]
    if record.gas_raw is not None or record.brake_raw is not None:
        lines.append(
            format_line(
                "inputs",
                potis + [("kind", "raw")],
                [("gas", record.gas_raw), ("brems", record.brake_raw)],
                ts,
            )
        )

    if record.gas_processed is not None or record.brake_processed is not None:
        lines.append(
            format_line(
                "inputs",
                potis + [("kind", "processed")],
                [("gas", record.gas_processed), ("brems", record.brake_processed)],
                ts,
            )
        )

    if record.front_controller is not None:
        lines.extend(_controller_lines(host, "front", record.front_controller, ts))
    if record.back_controller is not None:
        lines.extend(_controller_lines(host, "back", record.back_controller, ts))

    return lines
