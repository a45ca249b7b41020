"""
Config Layer - startup configuration validation
"""

from .validator import ConfigValidator

__all__ = ["ConfigValidator"]
