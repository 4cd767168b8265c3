from .telemetry import MotorReading, ControllerReading, TelemetryRecord

__all__ = ["MotorReading", "ControllerReading", "TelemetryRecord"]
