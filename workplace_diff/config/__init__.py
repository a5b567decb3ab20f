from .loader import (
    DEFAULT_CONFIG_PATH,
    CompareConfig,
    ConfigError,
    ReaderSettings,
    load_config,
    load_default_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "CompareConfig",
    "ConfigError",
    "ReaderSettings",
    "load_config",
    "load_default_config",
]
