#!/usr/bin/env python3
"""
Main entry point for the Kissan Saathi irrigation backend.
Run with: python3 run.py
"""
import sys
import logging
from kissanapp import create_app
from kissanapp.config import HOST, PORT

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger(__name__)


def main():
    """Initialize and run the Flask application."""
    try:
        app = create_app()
        logger.info(f"Server running on {HOST}:{PORT}")

        app.run(
            host=HOST,
            port=PORT,
            debug=False,
            use_reloader=False
        )
    except KeyboardInterrupt:
        logger.info("Application stopped by user")
        sys.exit(0)
    except Exception as e:
        logger.critical(f"Fatal error starting application: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
