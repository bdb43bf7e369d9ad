from .exceptions import RiskPanelException, RecordSchemaError, ConfigError, InvalidThresholdError
from .logger_config import apply_log_settings, setup_logger

__all__ = [
    "RiskPanelException",
    "RecordSchemaError",
    "ConfigError",
    "InvalidThresholdError",
    "setup_logger",
    "apply_log_settings",
]
