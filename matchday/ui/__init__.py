"""
User interface package for the Matchday Sideline Timekeeper.

This package contains the local web command API.
"""
from .web_app import create_app, run_web_app, WebAppState

__all__ = ["create_app", "run_web_app", "WebAppState"]
