"""
Campus Connect messaging and notifications backend.
"""

__version__ = "1.0.0"
