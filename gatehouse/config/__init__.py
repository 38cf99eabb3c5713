"""
Configuration package for the gatehouse service.
"""

from gatehouse.config.settings import Settings, get_settings, settings

__all__ = ['settings', 'get_settings', 'Settings']
