"""
Request payload validation for the irrigation API.
"""
import math
from typing import Any


class ValidationError(Exception):
    """Base exception for rejected request payloads.

    The message is returned verbatim to the client.
    """

    message = "Invalid request"

    def __init__(self, message=None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidSensorFormat(ValidationError):
    """One or more of temperature/humidity/moisture is not a number."""
    message = "Invalid sensor data format"


class InvalidSafetyValue(ValidationError):
    """Safety flag is not a boolean."""
    message = "Invalid safety value"


def is_number(value: Any) -> bool:
    """True for finite JSON numbers.

    Booleans are rejected even though bool is an int. NaN and Infinity
    are rejected so every stored reading serializes as strict JSON.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def require_numbers(*values: Any):
    """Raise InvalidSensorFormat unless every value is a number."""
    if not all(is_number(v) for v in values):
        raise InvalidSensorFormat()


def require_bool(value: Any):
    if not isinstance(value, bool):
        raise InvalidSafetyValue()
