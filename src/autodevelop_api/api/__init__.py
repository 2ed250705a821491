"""API module for the AutoDevelop API."""

from autodevelop_api.api.app import create_app

__all__ = ["create_app"]
