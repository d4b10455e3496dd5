"""Configuration module for Large Object Store."""

from .settings import Settings, settings

__all__ = ["Settings", "settings"]
