"""
Sensor node client: the ESP32 reporting loop, driven from Python.

Each cycle reads the sensors, pushes the reading to the backend, fetches
the pump command and decides whether the relay should be energized.
"""
import logging
import requests
from dataclasses import dataclass
from typing import Optional, Dict, Any, Callable, Tuple

from .config import NODE_MOISTURE_THRESHOLD, NODE_TIMEOUT

logger = logging.getLogger(__name__)


class NodeError(Exception):
    """Base exception for node-to-backend communication errors."""
    pass


class NodeTimeoutError(NodeError):
    """Backend did not respond within timeout period."""
    pass


@dataclass
class NodeCycle:
    """Outcome of one reporting cycle."""
    temperature: float
    humidity: float
    moisture: float
    sent_status: Optional[int]
    command: Optional[Dict[str, Any]]
    relay_on: bool


def decide_relay(command: Optional[Dict[str, Any]], moisture: float,
                 threshold: float = NODE_MOISTURE_THRESHOLD) -> bool:
    """
    Decide whether the pump relay should be on.

    Args:
        command: Decoded GET /api/pump response, or None if unavailable
        moisture: Local soil moisture reading (%)
        threshold: Moisture below which the node waters in AUTO mode

    Returns:
        True to energize the relay
    """
    if command:
        if command.get("safetyActive"):
            return False
        if command.get("mode") == "MANUAL":
            return command.get("state") == "ON"
    return moisture < threshold


class SensorNodeClient:
    """
    HTTP client for the irrigation backend, used by the sensor node.
    """

    def __init__(self, base_url: str, timeout: float = NODE_TIMEOUT,
                 threshold: float = NODE_MOISTURE_THRESHOLD):
        """
        Initialize node client.

        Args:
            base_url: Backend root, e.g. http://192.168.1.7:5000
            timeout: Request timeout in seconds
            threshold: Local AUTO-mode moisture threshold (%)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.threshold = threshold
        self.session = requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise NodeTimeoutError(f"{method} {url} timed out after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise NodeError(f"{method} {url} failed: {e}") from e

    def send_reading(self, temperature: float, humidity: float, moisture: float) -> int:
        """
        Push a reading to POST /api/esp32.

        Returns:
            HTTP status code of the response
        """
        response = self._request("POST", "/api/esp32", json={
            "temperature": temperature,
            "humidity": humidity,
            "moisture": moisture,
        })
        logger.info(f"[NODE] Data sent: {response.status_code}")
        return response.status_code

    def fetch_pump_command(self) -> Dict[str, Any]:
        """
        Fetch the current pump command from GET /api/pump.

        Raises:
            NodeError: on network failure, non-200 status or a non-JSON body
        """
        response = self._request("GET", "/api/pump")
        if response.status_code != 200:
            raise NodeError(f"Pump command request returned {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise NodeError(f"Pump command was not valid JSON: {e}") from e

    def run_cycle(self, read_sensors: Callable[[], Tuple[float, float, float]]) -> NodeCycle:
        """
        Run one reporting cycle.

        A failed send or fetch is logged and the node falls back to local
        AUTO logic for this cycle.
        """
        temperature, humidity, moisture = read_sensors()

        sent_status = None
        try:
            sent_status = self.send_reading(temperature, humidity, moisture)
        except NodeError as e:
            logger.warning(f"[NODE] Failed to send reading: {e}")

        command = None
        try:
            command = self.fetch_pump_command()
        except NodeError as e:
            logger.warning(f"[NODE] No pump command, using local logic: {e}")

        relay_on = decide_relay(command, moisture, self.threshold)
        logger.info(
            f"[NODE] T:{temperature} H:{humidity} M:{moisture} "
            f"P:{'ON' if relay_on else 'OFF'}"
        )
        return NodeCycle(
            temperature=temperature,
            humidity=humidity,
            moisture=moisture,
            sent_status=sent_status,
            command=command,
            relay_on=relay_on,
        )

    def close(self):
        self.session.close()
