"""
Procedural level generation for a window cleaning game.
"""

__version__ = "0.1.0"
