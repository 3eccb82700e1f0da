# Configuration package
"""
Configuration package for the storefront payment gateway
Exports the settings loader from settings.py for easy import
"""
from .load_env import load_environment
from .settings import Settings, get_settings, validate_settings

__all__ = ["Settings", "get_settings", "validate_settings", "load_environment"]
