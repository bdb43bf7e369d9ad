"""
Alert engine: temporal alert flags for the month x area panel.

For every area, records are put in month order and two signals are computed
for each month ``t``:

    alert_spike   - risk_index[t] > baseline * (1 + threshold), where the
                    baseline is the mean of the non-null risk_index values in
                    months t-6 .. t-1 and needs at least 3 of them
    alert_trend3  - risk_index[t-2] < risk_index[t-1] < risk_index[t], all
                    three present

alert_level is 'none' | 'watch' | 'warning' for 0 | 1 | 2 signals.

The recompute is a pure function of (records, threshold) and is meant to be
called again, from scratch, every time the threshold changes.
"""

from __future__ import annotations

import math
import numbers
import operator
from functools import reduce
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from riskpanel.config import DEFAULT_BASELINE_WINDOW, DEFAULT_MIN_PERIODS
from riskpanel.records import (
    AlertLevel,
    EnrichedRecord,
    PanelRecord,
    as_panel_record,
    records_from_frame,
    records_to_frame,
)
from riskpanel.utils.exceptions import ConfigError, InvalidThresholdError
from riskpanel.utils.logger_config import setup_logger

logger = setup_logger(__name__, level='INFO')

ALERT_COLUMNS = ['alert_spike', 'alert_trend3', 'alert_level']


def _validate_threshold(threshold: Any) -> float:
    if isinstance(threshold, bool) or not isinstance(threshold, numbers.Real):
        raise InvalidThresholdError(f'Threshold must be a number, got {threshold!r}')
    value = float(threshold)
    if not math.isfinite(value) or value <= 0:
        raise InvalidThresholdError(f'Threshold must be in (0, inf), got {threshold!r}')
    return value


def _group_by_area(records: Iterable[PanelRecord]) -> Dict[Any, List[PanelRecord]]:
    # dicts keep first-seen order, which fixes the output order of the groups
    groups: Dict[Any, List[PanelRecord]] = {}
    for record in records:
        groups.setdefault(record.area_id, []).append(record)
    return groups


def _window_mean(window: np.ndarray) -> float:
    # plain left-to-right sum over the non-null values, then divide by their count
    values = window[~np.isnan(window)]
    return reduce(operator.add, values.tolist(), 0.0) / len(values)


def _spike_flag(series: pd.Series, window: int, threshold: float, min_periods: int) -> pd.Series:
    """
    For a single area's month-sorted risk_index series, return a boolean
    Series where True means the value is > baseline * (1 + threshold).

    baseline for month t = mean of t-window ... t-1 (rolling, NaN excluded,
    min_periods non-null values required).
    """
    baseline = (
        series.shift(1)
        .rolling(window=window, min_periods=min_periods)
        .apply(_window_mean, raw=True)
    )
    return (series > baseline * (1 + threshold)).fillna(False).astype(bool)


def _trend3_flag(series: pd.Series) -> pd.Series:
    """
    Return True for month t when risk_index[t-2] < risk_index[t-1] < risk_index[t].
    A missing value anywhere in the three breaks the chain.
    """
    s1 = series.shift(1)   # t-1
    s2 = series.shift(2)   # t-2
    return ((series > s1) & (s1 > s2)).fillna(False).astype(bool)


def recompute_alerts(
    records: Optional[Iterable[Any]],
    threshold: float,
    *,
    baseline_window: int = DEFAULT_BASELINE_WINDOW,
    min_periods: int = DEFAULT_MIN_PERIODS,
) -> List[EnrichedRecord]:
    """
    Enrich panel records with alert_spike, alert_trend3 and alert_level.

    Args:
        records: PanelRecords or flat mappings, in any order
        threshold: Fractional rise above the baseline that counts as a spike
        baseline_window: Number of preceding months in the baseline
        min_periods: Minimum non-null months needed for a baseline

    Returns:
        One EnrichedRecord per input record. Areas appear in order of first
        appearance, each area's records ascending by month.

    Raises:
        InvalidThresholdError: If threshold is not a finite number > 0
        ConfigError: If baseline_window or min_periods is below 1, or
            min_periods exceeds baseline_window
    """
    threshold = _validate_threshold(threshold)
    if baseline_window < 1 or min_periods < 1:
        raise ConfigError(
            f'baseline_window and min_periods must be >= 1, got {baseline_window}/{min_periods}'
        )
    if min_periods > baseline_window:
        raise ConfigError(
            f'min_periods ({min_periods}) cannot exceed baseline_window ({baseline_window})'
        )
    if not records:
        return []

    groups = _group_by_area(as_panel_record(r) for r in records)

    result: List[EnrichedRecord] = []
    for rows in groups.values():
        ordered = sorted(rows, key=lambda r: r.month)
        risk = pd.Series([r.risk_index for r in ordered], dtype='float64')

        spike = _spike_flag(risk, baseline_window, threshold, min_periods)
        trend3 = _trend3_flag(risk)

        for i, row in enumerate(ordered):
            result.append(EnrichedRecord.from_panel(row, bool(spike.iat[i]), bool(trend3.iat[i])))

    logger.debug(
        f'Recomputed alerts for {len(result)} records across {len(groups)} areas '
        f'(threshold={threshold}, window={baseline_window}, min_periods={min_periods})'
    )
    return result


def recompute_alerts_frame(
    df: Optional[pd.DataFrame],
    threshold: float,
    *,
    baseline_window: int = DEFAULT_BASELINE_WINDOW,
    min_periods: int = DEFAULT_MIN_PERIODS,
) -> pd.DataFrame:
    """DataFrame flavour of recompute_alerts; rows come back in the same order."""
    if df is None or df.empty:
        _validate_threshold(threshold)
        columns = [] if df is None else list(df.columns)
        return pd.DataFrame(columns=columns + [c for c in ALERT_COLUMNS if c not in columns])
    enriched = recompute_alerts(
        records_from_frame(df),
        threshold,
        baseline_window=baseline_window,
        min_periods=min_periods,
    )
    return records_to_frame(enriched)


def alert_summary(records: Iterable[EnrichedRecord]) -> str:
    """Return a short human-readable summary of alert counts."""
    records = list(records)
    spike_count = sum(1 for r in records if r.alert_spike)
    trend3_count = sum(1 for r in records if r.alert_trend3)
    watch_count = sum(1 for r in records if r.alert_level == AlertLevel.WATCH)
    warning_count = sum(1 for r in records if r.alert_level == AlertLevel.WARNING)
    return (
        f"{len(records)} rows | "
        f"alert_spike={spike_count} | alert_trend3={trend3_count} | "
        f"watch={watch_count} | warning={warning_count}"
    )
