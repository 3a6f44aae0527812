"""
Flask views/routes for the irrigation JSON API.
Sensor ingest from the ESP32 node plus operator pump and safety control.
"""
import logging
from flask import Blueprint, current_app, request, jsonify
from werkzeug.exceptions import HTTPException

from .config import HEALTH_STATUS
from .state import IrrigationState
from .validation import ValidationError

logger = logging.getLogger(__name__)

bp = Blueprint("main", __name__)

STATE_EXTENSION = "kissan_state"


# ============================================================================
# Helper Functions
# ============================================================================

def get_state() -> IrrigationState:
    """State record owned by the running app."""
    return current_app.extensions[STATE_EXTENSION]


def json_body() -> dict:
    """Parsed JSON object body, or an empty dict for anything else."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return {}
    return data


def format_timestamp(value):
    return value.isoformat() if value is not None else None


# ============================================================================
# Health
# ============================================================================

@bp.route("/")
def health():
    """Liveness check."""
    return jsonify({"status": HEALTH_STATUS})


# ============================================================================
# Sensor Routes
# ============================================================================

@bp.route("/api/sensors")
def api_sensors():
    """Latest readings plus pump and safety flags."""
    s = get_state().get_sensors()
    return jsonify({
        "temperature": s["temperature"],
        "humidity": s["humidity"],
        "moisture": s["moisture"],
        "ph": s["ph"],
        "weather": s["weather"],
        "lastUpdated": format_timestamp(s["last_updated"]),
        "pumpState": s["pump_state"].value,
        "pumpMode": s["pump_mode"].value,
        "safetyActive": s["safety_active"],
    })


@bp.route("/api/esp32", methods=["POST"])
def api_esp32():
    """Ingest a reading from the sensor node."""
    data = json_body()
    get_state().report_sensor_data(
        data.get("temperature"),
        data.get("humidity"),
        data.get("moisture"),
    )
    return jsonify({"message": "ESP32 data updated"})


@bp.route("/api/manual", methods=["POST"])
def api_manual():
    """Operator override for pH and weather."""
    data = json_body()
    get_state().manual_update(ph=data.get("ph"), weather=data.get("weather"))
    return jsonify({"message": "Manual data updated"})


# ============================================================================
# Pump Control Routes
# ============================================================================

@bp.route("/api/pump", methods=["POST"])
def api_set_pump():
    data = json_body()
    result = get_state().set_pump(state=data.get("state"), mode=data.get("mode"))
    return jsonify({
        "success": True,
        "state": result["state"].value,
        "mode": result["mode"].value,
        "safetyActive": result["safety_active"],
    })


@bp.route("/api/pump", methods=["GET"])
def api_get_pump():
    """Pump command as the node should apply it."""
    pump = get_state().get_pump()
    return jsonify({
        "state": pump["state"].value,
        "mode": pump["mode"].value,
        "safetyActive": pump["safety_active"],
    })


# ============================================================================
# Safety Control Routes
# ============================================================================

@bp.route("/api/safety", methods=["POST"])
def api_safety():
    data = json_body()
    result = get_state().set_safety(data.get("active"))
    return jsonify({
        "success": True,
        "safetyActive": result["safety_active"],
        "pumpState": result["pump_state"].value,
    })


# ============================================================================
# Error Handlers
# ============================================================================

@bp.app_errorhandler(ValidationError)
def validation_error(error):
    """Rejected payloads are reported to the caller as 400."""
    logger.warning(f"[VIEWS] {request.method} {request.path} rejected: {error.message}")
    return jsonify({"error": error.message}), 400


@bp.app_errorhandler(404)
def not_found(error):
    return jsonify({"error": "Not found"}), 404


@bp.app_errorhandler(405)
def method_not_allowed(error):
    return jsonify({"error": "Method not allowed"}), 405


@bp.app_errorhandler(Exception)
def internal_error(error):
    """Handle unexpected errors."""
    if isinstance(error, HTTPException):
        return jsonify({"error": error.description}), error.code
    logger.exception(f"[VIEWS] Unhandled error in {request.method} {request.path}")
    return jsonify({"error": "Internal server error"}), 500
