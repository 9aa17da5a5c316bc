from .logging import get_logger, reset_logging_configuration, setup_logging
from .model import LogFormat, LoggingConfig, Settings, load_config_file, load_settings

__all__ = [
    "LogFormat",
    "LoggingConfig",
    "Settings",
    "get_logger",
    "load_config_file",
    "load_settings",
    "reset_logging_configuration",
    "setup_logging",
]
