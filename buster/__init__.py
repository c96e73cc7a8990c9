"""Buster - content-hash fingerprinting for static web assets.

Copies or renames matching files to ``name.<hash>.ext`` and writes a JSON
manifest mapping original to fingerprinted paths.
"""

__version__ = "0.1.0"
__author__ = "Buster Contributors"

from buster.config import BusterConfig, Settings, build_config, get_settings

__all__ = ["BusterConfig", "Settings", "build_config", "get_settings", "__version__"]
