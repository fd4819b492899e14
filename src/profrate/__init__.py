"""
profrate

Authentication and user-administration service for the professor rating platform.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
