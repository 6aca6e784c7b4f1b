"""
Configuration package for the content engine
"""

from .parser_config import config_manager, ParserConfig, ParserConfigManager

__all__ = ["config_manager", "ParserConfig", "ParserConfigManager"]
