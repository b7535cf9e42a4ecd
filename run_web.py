#!/usr/bin/env python3
"""
Main entry point for the Matchday Sideline Timekeeper web command API.

This script restores any saved match and launches the Flask-based server.
"""
import logging

from matchday.services import ServiceFactory
from matchday.ui.web_app import run_web_app
from matchday.utils import AppConfig

if __name__ == "__main__":
    config = AppConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )
    run_web_app(ServiceFactory(config=config))
