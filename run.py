#!/usr/bin/env python3
"""
Run script for the field service backend
"""

import argparse
import os
import sys

from dotenv import load_dotenv

# Load environment variables from .env before the app reads them
load_dotenv()

from fieldservice import create_app  # noqa: E402
from fieldservice.build import build_database  # noqa: E402
from fieldservice.utils.logger import get_logger  # noqa: E402

logger = get_logger("fieldservice.run")


def parse_arguments():
    parser = argparse.ArgumentParser(description='Field service maintenance backend')
    parser.add_argument('--build-only', action='store_true',
                        help='Create tables and the admin account, then exit')
    parser.add_argument('--demo-data', action='store_true',
                        help='Insert demo equipment, belts and part links')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()
    app = create_app()

    with app.app_context():
        build_database(demo_data=args.demo_data)

    if args.build_only:
        logger.info("Build completed. Exiting without starting web server.")
        sys.exit(0)

    debug_mode = os.environ.get('FLASK_DEBUG', 'False').lower() in ('true', '1', 'yes', 'on')
    use_reloader = os.environ.get('USE_RELOADER', 'False').lower() in ('true', '1', 'yes', 'on')
    host = os.environ.get('FLASK_HOST', '127.0.0.1')
    port = int(os.environ.get('FLASK_PORT', '5000'))

    if debug_mode:
        logger.warning("DEBUG MODE ENABLED - Do not use in production!")

    logger.info(f"Starting server on {host}:{port} (debug={debug_mode}, reloader={use_reloader})")
    app.run(debug=debug_mode, host=host, port=port, use_reloader=use_reloader)
