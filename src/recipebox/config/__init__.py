"""Configuration — defaults, YAML/env hierarchy and typed settings."""

from recipebox.config.hierarchy import load_config_hierarchy
from recipebox.config.settings import Settings

__all__ = ["Settings", "load_config_hierarchy"]
