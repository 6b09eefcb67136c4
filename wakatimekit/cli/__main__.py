"""
Entry point for running WakaTimeKit CLI as a module.

Usage: python -m wakatimekit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
