"""
Configuration for pyramid generation.
"""

from .pyramid_config import PyramidConfig

__all__ = ["PyramidConfig"]
