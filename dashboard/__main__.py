#!/usr/bin/env python3
"""Main entry point for the Admin Console Service"""

import uvicorn

from admin_console.config import get_config
from admin_console.logging_config import setup_logging
from dashboard.app import create_app


def main():
    """Start the console service"""
    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)
    app = create_app()

    print("Admin Console Service")
    print(f"Starting on http://{config.dashboard_host}:{config.dashboard_port}")
    print(f"Backend API: {config.api_base_url}")
    print(f"API docs: http://{config.dashboard_host}:{config.dashboard_port}/docs")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        app,
        host=config.dashboard_host,
        port=config.dashboard_port,
        reload=False,
        access_log=False
    )


if __name__ == "__main__":
    main()
