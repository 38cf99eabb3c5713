"""
Utility package exports
"""

from .datetime_utils import DateTimeHelper

__all__ = ["DateTimeHelper"]
