"""
Service configuration: defaults, loading and validation.
"""
from .defaults import ServiceConfig, get_default_config
from .loader import ConfigLoader, load_config

__all__ = ["ServiceConfig", "get_default_config", "ConfigLoader", "load_config"]
