from bridgedash.config.settings import Settings, get_settings, load_config
from bridgedash.config.timeframes import UnknownTimeframeError, timeframe_ms, window_start

__all__ = [
    "Settings",
    "get_settings",
    "load_config",
    "UnknownTimeframeError",
    "timeframe_ms",
    "window_start",
]
