"""Configuration module for the AutoDevelop API."""

from autodevelop_api.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
