import logging
import os
from datetime import datetime
from typing import Optional


def _file_handler(log_dir):
    # Configs for how logs will appear in log_dir/
    os.makedirs(log_dir, exist_ok=True)
    file_format = logging.Formatter(
        '%(levelname)s : %(name)s : %(funcName)s : %(lineno)d : %(message)s'
    )

    log_file = os.path.join(log_dir, f'riskpanel_{datetime.now().strftime("%m%d%Y")}')
    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_format)
    return file_handler


def setup_logger(name, level: Optional[str] = None, log_dir: Optional[str] = None):
    """
    Basic Custom Logging formatting and handling

    Parameters
    name (str) : Name of the logger
    level (str) : Optional level name, defaults to DEBUG
    log_dir (str) : Optional directory for a dated log file; console only when None

    Returns:
    logging.Logger : Configured Logger Instance
    """

    # Create Logger
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (level or 'DEBUG').upper(), logging.DEBUG))

    # Handlers are attached once per logger name
    if logger.handlers:
        return logger

    if log_dir:
        logger.addHandler(_file_handler(log_dir))

    # Console logs configs
    console_format = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s'
    )
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(console_format)

    # Add the config to the Logger obj
    logger.addHandler(console_handler)

    return logger


def apply_log_settings(level: str, log_dir: Optional[str] = None, prefix: str = 'riskpanel'):
    """
    Apply a level (and optionally a log directory) to every existing logger under ``prefix``.

    The engine modules create their loggers at import without reading any
    settings; this is called once settings have actually been loaded.
    """
    for name, obj in list(logging.root.manager.loggerDict.items()):
        if not isinstance(obj, logging.Logger):
            continue
        if name != prefix and not name.startswith(prefix + '.'):
            continue
        obj.setLevel(getattr(logging, level.upper(), logging.INFO))
        if log_dir and not any(isinstance(h, logging.FileHandler) for h in obj.handlers):
            obj.addHandler(_file_handler(log_dir))
