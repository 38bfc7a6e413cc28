"""Configuration package for the transparency interview client."""
from .settings import Settings, settings

__all__ = ["Settings", "settings"]
