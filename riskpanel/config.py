"""
Engine settings read from the environment.

Values come from ``RISKPANEL_*`` variables, optionally seeded from a ``.env``
file through python-dotenv. Defaults match the dashboard: a 50 % spike
threshold over a 6-month baseline that needs at least 3 months of history,
and a top-10 ranking.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from riskpanel.utils.exceptions import ConfigError

DEFAULT_ALERT_THRESHOLD = 0.5
DEFAULT_BASELINE_WINDOW = 6
DEFAULT_MIN_PERIODS = 3
DEFAULT_TOP_N = 10

# Slider contract for the spike threshold
THRESHOLD_MIN = 0.10
THRESHOLD_MAX = 1.00
THRESHOLD_STEP = 0.05


@dataclass(frozen=True)
class EngineSettings:
    alert_threshold: float = DEFAULT_ALERT_THRESHOLD
    baseline_window: int = DEFAULT_BASELINE_WINDOW
    min_periods: int = DEFAULT_MIN_PERIODS
    top_n: int = DEFAULT_TOP_N
    log_level: str = 'INFO'
    log_dir: Optional[str] = None


def _env(name: str, cast, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigError(f'Invalid value for {name}: {raw!r}')


def load_settings(env_file: Optional[str] = None) -> EngineSettings:
    """
    Build EngineSettings from the environment.

    Args:
        env_file: Optional path to a .env file; the default lookup is used when None

    Returns:
        EngineSettings with every unset variable at its default

    Raises:
        ConfigError: If a variable cannot be parsed or is out of range
    """
    load_dotenv(dotenv_path=env_file)

    settings = EngineSettings(
        alert_threshold=_env('RISKPANEL_ALERT_THRESHOLD', float, DEFAULT_ALERT_THRESHOLD),
        baseline_window=_env('RISKPANEL_BASELINE_WINDOW', int, DEFAULT_BASELINE_WINDOW),
        min_periods=_env('RISKPANEL_MIN_PERIODS', int, DEFAULT_MIN_PERIODS),
        top_n=_env('RISKPANEL_TOP_N', int, DEFAULT_TOP_N),
        log_level=_env('RISKPANEL_LOG_LEVEL', str, 'INFO').upper(),
        log_dir=_env('RISKPANEL_LOG_DIR', str, None),
    )

    if not settings.alert_threshold > 0:
        raise ConfigError(f'RISKPANEL_ALERT_THRESHOLD must be > 0, got {settings.alert_threshold}')
    if settings.baseline_window < 1 or settings.min_periods < 1:
        raise ConfigError('RISKPANEL_BASELINE_WINDOW and RISKPANEL_MIN_PERIODS must be >= 1')
    if settings.min_periods > settings.baseline_window:
        raise ConfigError(
            f'RISKPANEL_MIN_PERIODS ({settings.min_periods}) cannot exceed '
            f'RISKPANEL_BASELINE_WINDOW ({settings.baseline_window})'
        )
    if not isinstance(logging.getLevelName(settings.log_level), int):
        raise ConfigError(f'Unknown RISKPANEL_LOG_LEVEL: {settings.log_level}')
    if settings.top_n < 0:
        raise ConfigError(f'RISKPANEL_TOP_N must be >= 0, got {settings.top_n}')
    return settings


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Process-wide settings, loaded once."""
    return load_settings()
