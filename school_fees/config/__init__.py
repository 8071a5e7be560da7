"""
Configuration package for the school fee engine.
"""

from school_fees.config.settings import Settings, get_settings, settings

__all__ = ['settings', 'get_settings', 'Settings']
