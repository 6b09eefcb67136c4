"""
Configuration loading for WakaTimeKit.
"""

from .settings import AgentSettings, load_settings, save_api_key

__all__ = ["AgentSettings", "load_settings", "save_api_key"]
