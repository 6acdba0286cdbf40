"""
Hunter System.

A single-player quest tracker with levels, attributes and loot.
"""

__version__ = "0.1.0"
