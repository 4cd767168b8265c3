from pydantic import BaseModel


class MotorReading(BaseModel):
    target_input: int
    speed: float
    current: float
    error_code: int

    class Config:
        frozen = True


class ControllerReading(BaseModel):
    """Electrical data of one motor controller board plus its two motors."""
    voltage: float
    temperature: float
    left_motor: MotorReading
    right_motor: MotorReading

    class Config:
        frozen = True


class TelemetryRecord(BaseModel):
    """One decoded positional record sent by a car."""
    uptime: int  # ms since boot
    utc: int  # epoch ms, timestamp of every line derived from this record
    freememory8: int
    rssi: int | None = None
    gas_raw: int | None = None
    brake_raw: int | None = None
    gas_processed: float | None = None
    brake_processed: float | None = None
    front_controller: ControllerReading | None = None
    back_controller: ControllerReading | None = None

    class Config:
        frozen = True
