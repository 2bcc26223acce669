from .events import TELEMETRY_CATEGORIES, TELEMETRY_EVENTS, TelemetryEvent, build_event
from .logger import TelemetryLogger

__all__ = ["TELEMETRY_CATEGORIES", "TELEMETRY_EVENTS", "TelemetryEvent", "TelemetryLogger", "build_event"]
