"""
precache - selectively populate the cache of toolchain binary artifacts.
"""

__version__ = "0.1.0"
