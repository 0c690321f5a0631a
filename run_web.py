#!/usr/bin/env python3
"""
Main entry point for the Sideline Manager web application.

Reads ``SIDELINE_*`` settings from the environment, signs in the local coach
(creating their team on first run) and launches the Flask server.
"""
import logging
import os

from sideline.services import ServiceFactory
from sideline.ui import create_app, run_web_app
from sideline.utils import AppConfig, configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    config = AppConfig.from_env()
    configure_logging(config.log_level)

    factory = ServiceFactory(config)
    user_id = os.environ.get("SIDELINE_USER", "local-coach")
    session = factory.open_session(user_id, os.environ.get("SIDELINE_TEAM_NAME"))
    manager = factory.create_game_manager(session)

    app = create_app(
        manager,
        planner=factory.create_lineup_planner(manager),
        report_service=factory.create_report_service(),
    )
    logger.info("Data file: %s", config.data_file)
    run_web_app(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
