"""
BinFlow

Shift reporting and bin tipping tracker for packhouse lines.
"""

__version__ = "1.0.0"
