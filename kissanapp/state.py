"""
Shared application state for sensor readings and pump control.
Thread-safe state management for concurrent access.
"""
import logging
from enum import Enum
from threading import Lock
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from .config import DEFAULT_PH, DEFAULT_WEATHER, MOISTURE_SAFETY_THRESHOLD
from .validation import is_number, require_numbers, require_bool

logger = logging.getLogger(__name__)


# ============================================================================
# Pump enums
# ============================================================================

class PumpState(str, Enum):
    ON = "ON"
    OFF = "OFF"


class PumpMode(str, Enum):
    AUTO = "AUTO"
    MANUAL = "MANUAL"


def effective_pump_state(stored: PumpState, safety_active: bool) -> PumpState:
    """State the pump actually reports. Safety always wins over stored intent."""
    if safety_active:
        return PumpState.OFF
    return stored


def _parse_enum(enum_cls, value: Any):
    """Exact match against enum values, None for anything else."""
    if not isinstance(value, str):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


# ============================================================================
# State record
# ============================================================================

class IrrigationState:
    """
    Process-wide record of the latest readings and pump control flags.

    One lock guards the whole record. Each public method holds it for its
    full read-modify-write sequence and returns plain snapshots.
    """

    def __init__(self):
        self._lock = Lock()
        self._sensors: Dict[str, Any] = {
            "temperature": 0,
            "humidity": 0,
            "moisture": 0,
            "ph": DEFAULT_PH,
            "weather": DEFAULT_WEATHER,
            "last_updated": None,
        }
        self.pump_state = PumpState.OFF
        self.pump_mode = PumpMode.AUTO
        self.safety_active = False

    # ------------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------------

    def get_sensors(self) -> Dict[str, Any]:
        """Get a snapshot of sensor readings merged with pump and safety flags."""
        with self._lock:
            snapshot = self._sensors.copy()
            snapshot["pump_state"] = self.pump_state
            snapshot["pump_mode"] = self.pump_mode
            snapshot["safety_active"] = self.safety_active
            return snapshot

    def get_pump(self) -> Dict[str, Any]:
        """Get the pump as clients should see it (safety applied)."""
        with self._lock:
            return {
                "state": effective_pump_state(self.pump_state, self.safety_active),
                "mode": self.pump_mode,
                "safety_active": self.safety_active,
            }

    # ------------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------------

    def report_sensor_data(self, temperature: Any, humidity: Any, moisture: Any,
                           now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Store a reading from the sensor node.

        Raises:
            InvalidSensorFormat: if any value is not a number. Nothing is stored.
        """
        require_numbers(temperature, humidity, moisture)

        with self._lock:
            self._sensors["temperature"] = temperature
            self._sensors["humidity"] = humidity
            self._sensors["moisture"] = moisture
            self._sensors["last_updated"] = now or datetime.now(timezone.utc)

            if moisture > MOISTURE_SAFETY_THRESHOLD:
                if not self.safety_active:
                    logger.warning(
                        f"[STATE] Moisture {moisture} above {MOISTURE_SAFETY_THRESHOLD}, "
                        "tripping safety"
                    )
                self.safety_active = True
                self.pump_state = PumpState.OFF

            snapshot = self._sensors.copy()

        _log_snapshot("ESP32 Data Updated", snapshot)
        return snapshot

    def manual_update(self, ph: Any = None, weather: Any = None) -> Dict[str, Any]:
        """Overwrite pH and/or weather. Non-numeric values are ignored."""
        with self._lock:
            if is_number(ph):
                self._sensors["ph"] = ph
            if is_number(weather):
                self._sensors["weather"] = weather
            snapshot = self._sensors.copy()

        _log_snapshot("Manual Update", snapshot)
        return snapshot

    def set_pump(self, state: Any = None, mode: Any = None) -> Dict[str, Any]:
        """
        Apply an operator pump command.

        Unrecognized values leave their field untouched. A state change
        while safety is active is dropped without error.

        Returns:
            Stored state, mode and safety flag after the update
        """
        new_mode = _parse_enum(PumpMode, mode)
        new_state = _parse_enum(PumpState, state)

        with self._lock:
            if new_mode is not None:
                self.pump_mode = new_mode
            if new_state is not None:
                if self.safety_active:
                    logger.info(f"[STATE] Safety active, ignoring pump state {new_state.value}")
                else:
                    self.pump_state = new_state
            result = {
                "state": self.pump_state,
                "mode": self.pump_mode,
                "safety_active": self.safety_active,
            }

        _log_snapshot("Pump Updated", {
            "pump_state": result["state"].value,
            "pump_mode": result["mode"].value,
        })
        return result

    def set_safety(self, active: Any) -> Dict[str, Any]:
        """
        Set the safety flag. Activating it also forces the pump off.

        Raises:
            InvalidSafetyValue: if active is not a boolean. Nothing is changed.
        """
        require_bool(active)

        with self._lock:
            self.safety_active = active
            if active:
                self.pump_state = PumpState.OFF
            result = {
                "safety_active": self.safety_active,
                "pump_state": self.pump_state,
            }

        _log_snapshot("Safety Status", result["safety_active"])
        return result


def _log_snapshot(title: str, data: Any):
    logger.info("[STATE] === %s === %s", title, data)
