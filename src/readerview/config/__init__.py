"""Configuration models for readerview."""

from .config import MonitoringConfig, ReadabilityOptions, ReaderableOptions, Settings, find_config_file

__all__ = ["MonitoringConfig", "ReadabilityOptions", "ReaderableOptions", "Settings", "find_config_file"]
