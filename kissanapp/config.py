"""
Configuration settings for the Kissan Saathi irrigation backend.
"""
import logging

logger = logging.getLogger(__name__)

# ============================================================================
# Server Configuration
# ============================================================================

# Bind to all interfaces so the sensor node on the LAN can reach us
HOST = "0.0.0.0"
PORT = 5000

HEALTH_STATUS = "Backend running"

# ============================================================================
# Sensor Defaults
# ============================================================================

# Values reported until the operator submits a manual override
DEFAULT_PH = 5.5
DEFAULT_WEATHER = 50

# ============================================================================
# Safety Configuration
# ============================================================================

# Soil moisture (%) above which safety trips and the pump is forced off.
# Safety is only ever cleared by an explicit POST /api/safety.
MOISTURE_SAFETY_THRESHOLD = 95

# ============================================================================
# Sensor Node Configuration
# ============================================================================

# Node waters locally when moisture drops below this (%) in AUTO mode
NODE_MOISTURE_THRESHOLD = 30.0

# Seconds between node reporting cycles
NODE_INTERVAL_SEC = 5

# HTTP timeout for node requests (seconds)
NODE_TIMEOUT = 5.0

# ============================================================================
# Logging
# ============================================================================

logger.debug("Configuration loaded from: %s", __file__)
logger.debug("Listening on %s:%s", HOST, PORT)
logger.debug("Moisture safety threshold: %s", MOISTURE_SAFETY_THRESHOLD)
