from .plugin_config import PluginConfigEntry

__all__ = [
    "PluginConfigEntry",
]
