"""Unit tests for the irrigation state record."""

import pytest

from kissanapp.state import IrrigationState, PumpMode, PumpState, effective_pump_state
from kissanapp.validation import InvalidSafetyValue, InvalidSensorFormat


class TestEffectivePumpState:
    """Tests for the read-time safety override."""

    def test_safety_forces_off(self):
        """Test that safety reports OFF whatever is stored."""
        assert effective_pump_state(PumpState.ON, True) is PumpState.OFF
        assert effective_pump_state(PumpState.OFF, True) is PumpState.OFF

    def test_stored_state_without_safety(self):
        """Test that the stored state passes through without safety."""
        assert effective_pump_state(PumpState.ON, False) is PumpState.ON
        assert effective_pump_state(PumpState.OFF, False) is PumpState.OFF


class TestDefaults:
    """Tests for a freshly created state record."""

    def test_sensor_defaults(self, state):
        """Test default sensor values."""
        s = state.get_sensors()
        assert s["temperature"] == 0
        assert s["humidity"] == 0
        assert s["moisture"] == 0
        assert s["ph"] == 5.5
        assert s["weather"] == 50
        assert s["last_updated"] is None

    def test_pump_defaults(self, state):
        """Test pump starts OFF in AUTO with safety clear."""
        assert state.get_pump() == {
            "state": PumpState.OFF,
            "mode": PumpMode.AUTO,
            "safety_active": False,
        }

    def test_instances_are_independent(self):
        """Test that two records do not share data."""
        a, b = IrrigationState(), IrrigationState()
        a.manual_update(ph=7.0)
        assert b.get_sensors()["ph"] == 5.5


class TestReportSensorData:
    """Tests for sensor node readings."""

    def test_stores_reading_and_timestamp(self, state, fixed_now):
        """Test that a valid reading is stored with its timestamp."""
        state.report_sensor_data(24.5, 61, 40.2, now=fixed_now)
        s = state.get_sensors()
        assert (s["temperature"], s["humidity"], s["moisture"]) == (24.5, 61, 40.2)
        assert s["last_updated"] == fixed_now

    def test_timestamp_defaults_to_now(self, state):
        """Test that last_updated is set without an explicit time."""
        state.report_sensor_data(20, 50, 30)
        assert state.get_sensors()["last_updated"] is not None

    @pytest.mark.parametrize(
        "values",
        [
            ("hot", 50, 30),
            (20, None, 30),
            (20, 50, "30"),
            (True, 50, 30),
            (20, 50, [30]),
            (float("nan"), 50, 30),
            (20, 50, float("inf")),
        ],
    )
    def test_invalid_reading_rejected(self, state, values):
        """Test that non-numeric values raise and change nothing."""
        state.report_sensor_data(21, 55, 35)
        before = state.get_sensors()

        with pytest.raises(InvalidSensorFormat) as exc_info:
            state.report_sensor_data(*values)

        assert exc_info.value.message == "Invalid sensor data format"
        assert state.get_sensors() == before

    def test_high_moisture_trips_safety(self, state):
        """Test that moisture above 95 activates safety and stops the pump."""
        state.set_pump(state="ON")
        state.report_sensor_data(20, 50, 96)

        s = state.get_sensors()
        assert s["safety_active"] is True
        assert s["pump_state"] is PumpState.OFF

    def test_threshold_is_exclusive(self, state):
        """Test that exactly 95 does not trip safety."""
        state.report_sensor_data(20, 50, 95)
        assert state.get_sensors()["safety_active"] is False

    def test_low_moisture_does_not_clear_safety(self, state):
        """Test that safety stays on after the soil dries out."""
        state.report_sensor_data(20, 50, 99)
        state.report_sensor_data(20, 50, 10)
        assert state.get_pump()["safety_active"] is True


class TestManualUpdate:
    """Tests for operator pH/weather overrides."""

    def test_updates_only_given_field(self, state):
        """Test that pH alone leaves weather untouched."""
        state.manual_update(ph=6.2)
        s = state.get_sensors()
        assert s["ph"] == 6.2
        assert s["weather"] == 50

    def test_non_numeric_ignored(self, state):
        """Test that non-numeric values are silently skipped."""
        state.manual_update(ph="acidic", weather=70)
        s = state.get_sensors()
        assert s["ph"] == 5.5
        assert s["weather"] == 70

    def test_nothing_given(self, state):
        """Test that an empty update is a no-op."""
        before = state.get_sensors()
        state.manual_update()
        assert state.get_sensors() == before


class TestSetPump:
    """Tests for operator pump commands."""

    def test_sets_state_and_mode(self, state):
        """Test a full pump command."""
        result = state.set_pump(state="ON", mode="MANUAL")
        assert result == {
            "state": PumpState.ON,
            "mode": PumpMode.MANUAL,
            "safety_active": False,
        }

    def test_unknown_values_are_noops(self, state):
        """Test that unrecognized values leave each field alone."""
        state.set_pump(state="ON", mode="MANUAL")
        result = state.set_pump(state="on", mode="SEMI")
        assert result["state"] is PumpState.ON
        assert result["mode"] is PumpMode.MANUAL

    def test_mode_without_state(self, state):
        """Test that mode changes independently of state."""
        result = state.set_pump(mode="MANUAL")
        assert result["mode"] is PumpMode.MANUAL
        assert result["state"] is PumpState.OFF

    def test_state_dropped_while_safety_active(self, state):
        """Test that ON is ignored under safety but mode still applies."""
        state.set_safety(True)
        result = state.set_pump(state="ON", mode="MANUAL")
        assert result["state"] is PumpState.OFF
        assert result["mode"] is PumpMode.MANUAL
        assert result["safety_active"] is True


class TestSafety:
    """Tests for the safety flag."""

    def test_activate_forces_pump_off(self, state):
        """Test that activating safety clears a stored ON."""
        state.set_pump(state="ON")
        result = state.set_safety(True)
        assert result == {"safety_active": True, "pump_state": PumpState.OFF}

    def test_deactivate_keeps_pump_off(self, state):
        """Test that clearing safety does not restart the pump."""
        state.set_pump(state="ON")
        state.set_safety(True)
        state.set_safety(False)
        assert state.get_pump()["state"] is PumpState.OFF

    def test_pump_usable_after_reset(self, state):
        """Test that commands apply again once safety is cleared."""
        state.set_safety(True)
        state.set_safety(False)
        assert state.set_pump(state="ON")["state"] is PumpState.ON

    @pytest.mark.parametrize("value", ["true", 1, 0, None, [True]])
    def test_invalid_value_rejected(self, state, value):
        """Test that non-boolean values raise and change nothing."""
        with pytest.raises(InvalidSafetyValue) as exc_info:
            state.set_safety(value)
        assert exc_info.value.message == "Invalid safety value"
        assert state.get_pump()["safety_active"] is False

    def test_get_pump_does_not_mutate_stored_state(self, state):
        """Test that the read-time override leaves stored intent alone."""
        state.set_pump(state="ON")
        state.safety_active = True

        assert state.get_pump()["state"] is PumpState.OFF
        assert state.pump_state is PumpState.ON
