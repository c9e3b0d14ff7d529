"""
Configuration for Stream Mirror.

Loads settings from environment variables and an optional .env file.
"""

from stream_mirror.config.env import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
