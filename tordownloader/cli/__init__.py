"""
Command-line interface for tordownloader.
"""

from .parser import CLI, main

__all__ = ["CLI", "main"]
