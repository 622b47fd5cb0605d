from app.configs.settings import (
    CONFIG_MAP,
    ENV_FILE,
    HashConfig,
    LimiterConfig,
    Settings,
    settings,
)

__all__ = [
    "CONFIG_MAP",
    "ENV_FILE",
    "HashConfig",
    "LimiterConfig",
    "Settings",
    "settings",
]
