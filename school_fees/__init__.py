"""
School fee computation and monthly allocation engine.
"""

__version__ = "1.0.0"
