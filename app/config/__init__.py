"""Configuration module for the Nobl9 project provisioner."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]
