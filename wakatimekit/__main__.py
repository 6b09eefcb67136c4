"""
Entry point for running WakaTimeKit CLI as a module.

Usage: python -m wakatimekit [command] [options]
"""

from wakatimekit.cli.parser import main

if __name__ == "__main__":
    main()
