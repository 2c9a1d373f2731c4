"""Configuration module for the MARE transform pipeline."""
from .loader import PipelineConfig, load_config, parse_config
from .settings import MareConfig, load_settings

__all__ = ["MareConfig", "load_settings", "PipelineConfig", "load_config", "parse_config"]
