"""
Entry point for running the tordownloader CLI as a module.

Usage: python -m tordownloader.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
