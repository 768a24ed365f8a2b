#!/usr/bin/env python3
"""
Main entry point for running the Filmtracker Flask application.
"""

from filmtracker.app import create_app

if __name__ == "__main__":
    # Settings come from the environment / .env; tables are created on startup
    app = create_app()
    app.run(port=4000, debug=True)
