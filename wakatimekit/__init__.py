"""
WakaTimeKit - runtime bootstrap and heartbeat dispatch for the wakatime-cli.

The host editor calls ``WakaTimeAgent.bootstrap()`` once on startup and
``WakaTimeAgent.notify()`` for every file edit or save.
"""

__version__ = "6.0.1"
