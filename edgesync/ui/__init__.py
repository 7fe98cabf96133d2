"""
Terminal output for edgesync.
"""

from . import display
from .colors import Colors

__all__ = ["display", "Colors"]
