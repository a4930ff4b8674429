"""Configuration management."""

from .global_config import GlobalConfig, session_file
from .local_config import LocalConfig

__all__ = ["GlobalConfig", "LocalConfig", "session_file"]
