"""
Database module - Generic async MongoDB connection over Motor.
"""

from common.database.mongodb import MongoDB

__all__ = ["MongoDB"]
