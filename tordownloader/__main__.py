"""
Entry point for running the tordownloader CLI as a module.

Usage: python -m tordownloader [command] [options]
"""

from tordownloader.cli.parser import main

if __name__ == "__main__":
    main()
