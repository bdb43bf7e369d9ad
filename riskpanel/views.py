"""
Dashboard views over the alert, comparison and ranking engines.

These helpers produce exactly what the rendering side consumes: the enriched
panel, a single-month slice, the delta records for a month pair, the alert
badge count and the top-N ranking. ``DashboardView`` ties them to one loaded
panel and keeps the last enrichment around so that repeated reads for the same
threshold do not recompute.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence, Tuple

from riskpanel.alerts import recompute_alerts
from riskpanel.comparison import compare_months
from riskpanel.config import (
    EngineSettings,
    THRESHOLD_MAX,
    THRESHOLD_MIN,
    THRESHOLD_STEP,
    get_settings,
)
from riskpanel.ranking import field_value, has_alert, rank_top_n
from riskpanel.records import DeltaRecord, EnrichedRecord, as_panel_record
from riskpanel.utils.logger_config import apply_log_settings, setup_logger

logger = setup_logger(__name__, level='INFO')

# How many months back the default comparison starts
DEFAULT_COMPARE_SPAN = 6

MODE_SINGLE = 'metricCompare'
MODE_COMPARE = 'monthCompare'


def records_for_month(records: Optional[Iterable[Any]], month: Optional[str]) -> List[Any]:
    """Records for one month, in input order."""
    if not records or not month:
        return []
    return [r for r in records if field_value(r, 'month') == month]


def count_alerts(records: Optional[Iterable[Any]]) -> int:
    """Number of records flagged watch or warning."""
    if not records:
        return 0
    return sum(1 for r in records if has_alert(r))


def default_month_pair(months: Sequence[str]) -> Tuple[Optional[str], Optional[str]]:
    """Start comparing six months before the latest month, or from the first month."""
    if not months:
        return None, None
    return months[max(0, len(months) - 1 - DEFAULT_COMPARE_SPAN)], months[-1]


def snap_threshold(
    value: float,
    lo: float = THRESHOLD_MIN,
    hi: float = THRESHOLD_MAX,
    step: float = THRESHOLD_STEP,
) -> float:
    """Clamp a threshold to [lo, hi] and round it onto the slider's step grid."""
    clamped = min(max(float(value), lo), hi)
    steps = round((clamped - lo) / step)
    return round(min(lo + steps * step, hi), 2)


class DashboardView:
    """
    One loaded panel plus the state-free queries the dashboard runs on it.

    Attributes:
        months (list): Available months, ascending
        settings (EngineSettings): Window, min periods and top-N size

    Example:
        >>> view = DashboardView(panel_records, months)
        >>> view.top_n(threshold=0.5, month='2024-06')
    """

    def __init__(
        self,
        records: Optional[Iterable[Any]],
        months: Optional[Sequence[str]] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.records = [as_panel_record(r) for r in (records or [])]
        self.months = list(months) if months else sorted({r.month for r in self.records})
        self.settings = settings or get_settings()
        apply_log_settings(self.settings.log_level, self.settings.log_dir)
        self._cache_key: Optional[float] = None
        self._cache_value: List[EnrichedRecord] = []

    def enriched(self, threshold: Optional[float] = None) -> List[EnrichedRecord]:
        """Full panel with alert flags for ``threshold``."""
        if threshold is None:
            threshold = self.settings.alert_threshold
        if self._cache_key != threshold:
            logger.debug(f'Threshold changed {self._cache_key} -> {threshold}; recomputing')
            enriched = recompute_alerts(
                self.records,
                threshold,
                baseline_window=self.settings.baseline_window,
                min_periods=self.settings.min_periods,
            )
            self._cache_key, self._cache_value = threshold, enriched
        return self._cache_value

    def month_slice(self, month: Optional[str], threshold: Optional[float] = None) -> List[EnrichedRecord]:
        return records_for_month(self.enriched(threshold), month)

    def deltas(
        self,
        month_a: Optional[str] = None,
        month_b: Optional[str] = None,
        threshold: Optional[float] = None,
    ) -> List[DeltaRecord]:
        """Delta records for a month pair; defaults to the dashboard's opening pair."""
        if month_a is None and month_b is None:
            month_a, month_b = default_month_pair(self.months)
        return compare_months(self.enriched(threshold), month_a, month_b)

    def alert_count(
        self,
        mode: str = MODE_SINGLE,
        month: Optional[str] = None,
        month_a: Optional[str] = None,
        month_b: Optional[str] = None,
        threshold: Optional[float] = None,
    ) -> int:
        return count_alerts(self._source(mode, month, month_a, month_b, threshold))

    def top_n(
        self,
        mode: str = MODE_SINGLE,
        month: Optional[str] = None,
        month_a: Optional[str] = None,
        month_b: Optional[str] = None,
        threshold: Optional[float] = None,
        display_metric: str = 'risk_index',
        alerts_only: bool = False,
    ) -> List[Any]:
        """Top-N ranking: delta_risk_index in compare mode, display_metric otherwise."""
        source = self._source(mode, month, month_a, month_b, threshold)
        metric = 'delta_risk_index' if mode == MODE_COMPARE else display_metric
        return rank_top_n(source, metric, alerts_only=alerts_only, n=self.settings.top_n)

    def _source(self, mode, month, month_a, month_b, threshold):
        if mode == MODE_COMPARE:
            return self.deltas(month_a, month_b, threshold)
        if month is None and self.months:
            month = self.months[-1]
        return self.month_slice(month, threshold)
