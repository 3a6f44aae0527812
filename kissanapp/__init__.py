"""
Flask application factory for the Kissan Saathi irrigation backend.
"""
import logging
from flask import Flask
from flask_cors import CORS

from .state import IrrigationState
from .views import bp as main_bp, STATE_EXTENSION

logger = logging.getLogger(__name__)


def create_app(state=None, test_config=None):
    """
    Create and configure the Flask application.

    Args:
        state: IrrigationState to serve; a fresh one is created if omitted
        test_config: Optional mapping of Flask config overrides

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    if test_config:
        app.config.from_mapping(test_config)

    # Any origin may call the API (operator UI is served separately)
    CORS(app, send_wildcard=True)

    app.extensions[STATE_EXTENSION] = state if state is not None else IrrigationState()
    logger.info("[APP] State initialized")

    app.register_blueprint(main_bp)
    logger.info("[APP] Registered main blueprint")

    logger.info("[APP] Application created successfully")
    return app
