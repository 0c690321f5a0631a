"""
UI package for the Sideline Manager.

This package contains the Flask web server exposing the game manager.
"""
from .web_app import create_app, run_web_app

__all__ = ["create_app", "run_web_app"]
